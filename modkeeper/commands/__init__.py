"""CLI subcommands for modkeeper."""
