"""CLI subcommands (gen, config)."""
