"""tsforge CLI subcommands."""
