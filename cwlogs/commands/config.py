"""`cwl config` - inspect and edit the persisted configuration."""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from cwlogs.core.config import Settings


def show(settings: Settings, console: Console) -> None:
    """Print the effective configuration."""
    console.print(f"[bold bright_blue]Config file:[/bold bright_blue] {escape(str(settings.path))}",
                  highlight=False)

    defaults = Table(title="Defaults", show_header=False)
    defaults.add_column("key", style="bright_cyan")
    defaults.add_column("value")
    defaults.add_row("region", settings.region)
    defaults.add_row("output", settings.output)
    defaults.add_row("max_events", str(settings.max_events))
    console.print(defaults)

    if settings.record.profiles:
        profiles = Table(title="Profiles")
        profiles.add_column("profile", style="bright_cyan")
        profiles.add_column("region")
        profiles.add_column("assume_role")
        for name, profile in sorted(settings.record.profiles.items()):
            profiles.add_row(name, profile.region or "", profile.assume_role or "")
        console.print(profiles)

    if settings.record.aliases:
        aliases = Table(title="Aliases")
        aliases.add_column("alias", style="bright_cyan")
        aliases.add_column("log group")
        for name, group in sorted(settings.record.aliases.items()):
            aliases.add_row(name, group)
        console.print(aliases)


def add_alias(settings: Settings, console: Console, name: str, group: str) -> None:
    """Persist a new alias."""
    settings.add_alias(name, group)
    settings.save()
    console.print(f"[bold bright_green]Saved alias[/bold bright_green] {escape(name)} → {escape(group)}",
                  highlight=False)
