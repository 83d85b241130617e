"""Command-line interface for toygit."""
