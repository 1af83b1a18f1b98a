"""命令行入口。"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from responsive_magick.core.config import ResponsiveConfig, load_site_config
from responsive_magick.core.exceptions import ResponsiveError
from responsive_magick.core.progress import ProgressUpdate
from responsive_magick.core.report import write_csv_report
from responsive_magick.core.scanner import collect_source_paths
from responsive_magick.processing.pipeline import render_srcsets
from responsive_magick.processing.session import BuildSession
from responsive_magick.utils.logging import setup_logging

app = typer.Typer(help="为静态站点图片生成响应式尺寸与 srcset。")

SiteRootOption = typer.Option(Path("."), "--site-root", "-s", help="站点源目录")
ConfigOption = typer.Option(None, "--config", "-c", help="站点配置文件，默认读取 <site-root>/_config.yml")
VerboseOption = typer.Option(False, "--verbose", "-v", help="输出执行的 ImageMagick 命令")


def _open_session(site_root: Path, config_path: Optional[Path], verbose: bool) -> BuildSession:
    site_root = site_root.expanduser().resolve()
    if config_path is None and (site_root / "_config.yml").is_file():
        config_path = site_root / "_config.yml"

    site_config = load_site_config(config_path) if config_path else {}
    if verbose:
        responsive = dict(site_config.get("responsive") or {})
        responsive["verbose"] = True
        site_config = {**site_config, "responsive": responsive}

    setup_logging(logging.DEBUG if verbose else logging.INFO)
    return BuildSession(site_root, ResponsiveConfig.from_site_config(site_config))


def _fail(exc: ResponsiveError) -> NoReturn:
    typer.echo(f"错误：{exc}", err=True)
    raise typer.Exit(code=1)


def _build_progress_callback(progress: Progress):
    task_id: Optional[int] = None

    def callback(update: ProgressUpdate) -> None:
        nonlocal task_id
        if update.total == 0:
            return
        if task_id is None:
            task_id = progress.add_task("生成 srcset", total=update.total)
        progress.update(task_id, completed=update.completed)
        if update.message and update.status == "done":
            progress.log(update.message)

    return callback


@app.command("srcset")
def srcset_cli(
    path: str = typer.Argument(..., help="以 / 开头的图片路径"),
    site_root: Path = SiteRootOption,
    config: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """生成缺失的派生图片并输出 srcset。"""

    try:
        session = _open_session(site_root, config, verbose)
        typer.echo(session.srcset(path))
    except ResponsiveError as exc:
        _fail(exc)


@app.command("size")
def size_cli(
    path: str = typer.Argument(..., help="以 / 开头的图片路径"),
    width: int = typer.Argument(..., help="目标宽度（像素）"),
    site_root: Path = SiteRootOption,
    config: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """生成单一宽度的派生图片并输出其路径。"""

    try:
        session = _open_session(site_root, config, verbose)
        typer.echo(session.size(path, width))
    except ResponsiveError as exc:
        _fail(exc)


@app.command("dims")
def dims_cli(
    path: str = typer.Argument(..., help="以 / 开头的图片路径"),
    site_root: Path = SiteRootOption,
    config: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """输出图片的宽和高。"""

    try:
        session = _open_session(site_root, config, verbose)
        typer.echo(f"{session.width(path)} {session.height(path)}")
    except ResponsiveError as exc:
        _fail(exc)


@app.command("build")
def build_cli(
    paths: Optional[List[str]] = typer.Argument(None, help="图片路径，未指定时扫描整个站点"),
    site_root: Path = SiteRootOption,
    config: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
    report: Optional[Path] = typer.Option(None, "--report", "-r", help="CSV 报告路径，默认写入派生目录"),
) -> None:
    """批量生成派生图片并写出处理报告。"""

    try:
        session = _open_session(site_root, config, verbose)
    except ResponsiveError as exc:
        _fail(exc)

    sources = list(paths) if paths else collect_source_paths(session.site_root)

    progress = Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        TimeElapsedColumn(),
    )
    with progress:
        result = render_srcsets(session, sources, progress_callback=_build_progress_callback(progress))

    report_path = report or session.site_root / session.config.derived_dir / "report.csv"
    write_csv_report(session.outcomes, report_path)

    for outcome in result.failed:
        typer.echo(f"失败：{outcome.source_path} -> {outcome.message}", err=True)
    typer.echo(f"处理完成：成功 {len(result.succeeded)} 张，失败 {len(result.failed)} 张。")
    typer.echo(f"报告文件：{report_path}")

    if result.failed:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
