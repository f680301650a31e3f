"""cvslog CLI — Typer application with parse, files, names, and init commands."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Tuple

import typer
from rich.console import Console

from cvslog import __version__

if TYPE_CHECKING:
    from cvslog.config.schema import CvsLogConfig
    from cvslog.rlog.models import ChangeSet

app = typer.Typer(
    name="cvslog",
    help="Turn CVS rlog reports into structured change sets.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)

# Exit codes
EXIT_OK = 0
EXIT_LOCATION_NOT_FOUND = 1
EXIT_ERROR = 2


def _configure_logging(verbose: bool, debug: bool) -> None:
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


def _load_config(config: Optional[str]) -> "CvsLogConfig":
    """Load .cvslog.toml from the working directory, exit 2 on failure."""
    from cvslog.config.loader import ConfigError, load_config

    try:
        return load_config(Path.cwd(), config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=EXIT_ERROR) from exc


def _apply_location_overrides(
    cfg: "CvsLogConfig",
    branch: Optional[str],
    tag: Optional[str],
    fallback: bool,
) -> None:
    if branch and tag:
        console.print("[bold red]Error:[/bold red] --branch and --tag are mutually exclusive")
        raise typer.Exit(code=EXIT_ERROR)
    if branch:
        cfg.location.type = "branch"
        cfg.location.name = branch
    elif tag:
        cfg.location.type = "tag"
        cfg.location.name = tag
    if fallback:
        cfg.location.fallback_to_mainline = True


def _read_change_set(
    logfile: str,
    cfg: "CvsLogConfig",
) -> "ChangeSet":
    """Parse LOGFILE (``-`` for stdin) with the resolved configuration."""
    from cvslog.config.loader import ConfigError
    from cvslog.rlog.errors import LocationNotFoundError, RlogParseError
    from cvslog.rlog.parser import parse_rlog
    from cvslog.rlog.source import FileSource, SpooledSource

    try:
        location = cfg.location.to_location()
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=EXIT_ERROR) from exc

    try:
        if logfile == "-":
            with SpooledSource(encoding=cfg.repository.encoding) as source:
                source.write(sys.stdin.buffer.read())
                return parse_rlog(source, location, cfg.repository.cvs_root)
        return parse_rlog(
            FileSource(logfile, encoding=cfg.repository.encoding),
            location,
            cfg.repository.cvs_root,
        )
    except LocationNotFoundError as exc:
        console.print(f"[bold yellow]Not found:[/bold yellow] {exc}")
        raise typer.Exit(code=EXIT_LOCATION_NOT_FOUND) from exc
    except RlogParseError as exc:
        console.print(f"[bold red]Parse error:[/bold red] {exc}")
        raise typer.Exit(code=EXIT_ERROR) from exc
    except (OSError, LookupError) as exc:
        console.print(f"[bold red]Error:[/bold red] cannot read {logfile}: {exc}")
        raise typer.Exit(code=EXIT_ERROR) from exc


def _prepare(
    logfile: str,
    config: Optional[str],
    root: Optional[str],
    branch: Optional[str],
    tag: Optional[str],
    fallback: bool,
    encoding: Optional[str],
) -> Tuple["CvsLogConfig", "ChangeSet"]:
    cfg = _load_config(config)
    if root:
        cfg.repository.cvs_root = root
    if encoding:
        cfg.repository.encoding = encoding
    _apply_location_overrides(cfg, branch, tag, fallback)
    return cfg, _read_change_set(logfile, cfg)


_LOGFILE = typer.Argument(..., help="rlog capture to read, or - for stdin")
_CONFIG = typer.Option(None, "--config", "-c", help="Path to .cvslog.toml")
_ROOT = typer.Option(None, "--root", "-r", help="CVSROOT the report was taken from")
_BRANCH = typer.Option(None, "--branch", "-b", help="Collect changes on this branch")
_TAG = typer.Option(None, "--tag", "-t", help="Collect changes up to this tag")
_FALLBACK = typer.Option(False, "--fallback", help="Read files lacking the branch/tag as mainline")
_ENCODING = typer.Option(None, "--encoding", "-e", help="Encoding of the report")


# ── parse ─────────────────────────────────────────────────────────────────────


@app.command()
def parse(
    logfile: str = _LOGFILE,
    config: Optional[str] = _CONFIG,
    root: Optional[str] = _ROOT,
    branch: Optional[str] = _BRANCH,
    tag: Optional[str] = _TAG,
    fallback: bool = _FALLBACK,
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json | yaml | xml"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write the change log to file"),
    encoding: Optional[str] = _ENCODING,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug output with state transitions"),
) -> None:
    """Parse an rlog report and render its change set."""
    from cvslog.output import FORMATS, json_report, terminal, xml_changelog, yaml_report

    _configure_logging(verbose, debug)

    if format and format not in FORMATS:
        console.print(f"[bold red]Invalid format:[/bold red] {format}")
        raise typer.Exit(code=EXIT_ERROR)

    cfg, change_set = _prepare(logfile, config, root, branch, tag, fallback, encoding)
    if format:
        cfg.output.format = format  # type: ignore[assignment]

    if verbose or debug:
        console.print(f"[dim]Location: {cfg.location.to_location()}[/dim]")
        console.print(f"[dim]CVSROOT: {cfg.repository.cvs_root or '(none)'}[/dim]")

    # --- Output ---
    report_text: Optional[str] = None

    if cfg.output.format == "terminal":
        terminal.render(change_set, show_summary=cfg.output.show_summary)
    elif cfg.output.format == "json":
        report_text = json_report.render(change_set)
    elif cfg.output.format == "yaml":
        report_text = yaml_report.render(change_set)
    elif cfg.output.format == "xml":
        report_text = xml_changelog.render(change_set.commits)

    if report_text is not None and not output:
        print(report_text)

    # --- Write to file ---
    if output:
        if report_text is None:
            # Terminal format still persists a machine-readable change log
            report_text = json_report.render(change_set)
        try:
            Path(output).write_text(report_text, encoding="utf-8")
        except OSError as exc:
            console.print(f"[bold red]Error:[/bold red] cannot write {output}: {exc}")
            raise typer.Exit(code=EXIT_ERROR) from exc
        if verbose:
            console.print(f"[dim]Change log written to {output}[/dim]")

    raise typer.Exit(code=EXIT_OK)


# ── files ─────────────────────────────────────────────────────────────────────


@app.command()
def files(
    logfile: str = _LOGFILE,
    config: Optional[str] = _CONFIG,
    root: Optional[str] = _ROOT,
    branch: Optional[str] = _BRANCH,
    tag: Optional[str] = _TAG,
    fallback: bool = _FALLBACK,
    encoding: Optional[str] = _ENCODING,
) -> None:
    """List the distinct files changed in the report."""
    from cvslog.config.loader import ConfigError
    from cvslog.state.comparer import compile_excluded_regions, filter_excluded

    _configure_logging(False, False)
    cfg, change_set = _prepare(logfile, config, root, branch, tag, fallback, encoding)

    try:
        patterns = compile_excluded_regions(cfg.repository.excluded_regions)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=EXIT_ERROR) from exc

    kept = set(filter_excluded(change_set.files, patterns))
    console.print(f"[bold]{len(change_set.files)} changed file(s):[/bold]")
    for f in change_set.files:
        marker = "  [red]dead[/red]" if f.dead else ""
        if f in kept:
            console.print(f"  [cyan]{f.full_name}[/cyan] [green]{f.revision}[/green]{marker}")
        else:
            console.print(f"  [dim]{f.full_name} {f.revision} (excluded)[/dim]")


# ── names ─────────────────────────────────────────────────────────────────────


@app.command()
def names(
    logfile: str = _LOGFILE,
    config: Optional[str] = _CONFIG,
    encoding: Optional[str] = _ENCODING,
) -> None:
    """List the branch and tag names seen in the report."""
    _configure_logging(False, False)
    cfg = _load_config(config)
    if encoding:
        cfg.repository.encoding = encoding
    cfg.location.type = "head"
    change_set = _read_change_set(logfile, cfg)

    console.print(f"[bold]Branches ({len(change_set.branch_names)}):[/bold]")
    for name in sorted(change_set.branch_names):
        console.print(f"  [cyan]{name}[/cyan]")
    console.print(f"[bold]Tags ({len(change_set.tag_names)}):[/bold]")
    for name in sorted(change_set.tag_names):
        console.print(f"  [yellow]{name}[/yellow]")


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init(
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config file"),
) -> None:
    """Generate a starter .cvslog.toml in the working directory."""
    from cvslog.config.defaults import CONFIG_FILENAME, DEFAULT_TOML

    config_path = Path.cwd() / CONFIG_FILENAME

    if config_path.exists() and not force:
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"cvslog {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """cvslog — Turn CVS rlog reports into structured change sets."""
