"""Rich terminal reporter — commit table and change summary."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from cvslog.rlog.models import ChangeSet, EditType, FileRevision

_EDIT_STYLE = {
    EditType.ADD: "bold green",
    EditType.EDIT: "yellow",
    EditType.DELETE: "bold red",
}

_EDIT_MARK = {
    EditType.ADD: "A",
    EditType.EDIT: "M",
    EditType.DELETE: "D",
}


def _file_label(f: FileRevision) -> Text:
    edit = f.edit_type
    label = Text(f"{_EDIT_MARK[edit]} ", style=_EDIT_STYLE[edit])
    label.append(f"{f.name} {f.revision}")
    return label


def render(
    change_set: ChangeSet,
    *,
    show_summary: bool = True,
    console: Optional[Console] = None,
) -> None:
    """Print the change set to the terminal using Rich."""
    console = console or Console()

    if change_set.is_empty:
        console.print()
        console.print("[bold green]No changes found.[/bold green]")
        if show_summary:
            _print_summary(console, change_set)
        return

    console.print()
    table = Table(
        title="CVS Changes",
        show_lines=True,
        title_style="bold",
        border_style="dim",
    )
    table.add_column("Date", style="green", no_wrap=True)
    table.add_column("Author", style="cyan")
    table.add_column("Files", style="magenta")
    table.add_column("Message", min_width=20)

    for commit in change_set.commits:
        files = Text("\n").join(_file_label(f) for f in commit.files)
        table.add_row(
            commit.timestamp.strftime("%Y-%m-%d %H:%M:%S %z"),
            commit.author,
            files,
            commit.message,
        )

    console.print(table)

    if show_summary:
        _print_summary(console, change_set)


def _print_summary(console: Console, change_set: ChangeSet) -> None:
    deleted = sum(1 for f in change_set.files if f.dead)
    console.print()
    console.print(f"[dim]Commits:[/dim]        {len(change_set.commits)}")
    console.print(f"[dim]Changed files:[/dim]  {len(change_set.files)}")
    console.print(f"[dim]Deleted:[/dim]        {deleted}")
    console.print(f"[dim]Branches seen:[/dim]  {len(change_set.branch_names)}")
    console.print(f"[dim]Tags seen:[/dim]      {len(change_set.tag_names)}")
