"""`cwl groups` - list log groups."""

from typing import Any, List, Optional

from rich.console import Console
from rich.markup import escape

from cwlogs.core.retrieval import filter_groups, list_log_groups


def run(
    source: Any,
    console: Console,
    prefix: Optional[str] = None,
    filter_pattern: Optional[str] = None,
) -> List[str]:
    """List log groups, optionally narrowed by prefix and regex.

    Returns:
        The names that were printed
    """
    console.print("[bold bright_blue]Fetching log groups...[/bold bright_blue]")

    with console.status("Loading log groups..."):
        groups = list_log_groups(source, prefix=prefix)

    groups = filter_groups(groups, filter_pattern)

    if not groups:
        console.print("[yellow]No log groups found[/yellow]")
        return groups

    console.print(f"[bold bright_green]Found[/bold bright_green] "
                  f"[bold bright_yellow]{len(groups)}[/bold bright_yellow] log groups:\n")
    for group in groups:
        console.print(f"  [bright_cyan]→[/bright_cyan] [bright_white]{escape(group)}[/bright_white]",
                      highlight=False)

    console.print("\n[bold bright_magenta]Tip:[/bold bright_magenta] Use "
                  "[italic bright_white]cwl tail <log-group>[/italic bright_white] to tail a specific log group")
    return groups
