"""Command implementations behind the `cwl` CLI."""
