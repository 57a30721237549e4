"""CLI subcommands for pomgraph."""
