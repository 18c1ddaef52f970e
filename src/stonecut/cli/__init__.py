"""Command-line interface for the slab optimizer."""
