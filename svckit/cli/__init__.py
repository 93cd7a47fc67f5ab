"""Command-line interface for svckit."""
