"""Command-line interface for vparecon."""
