"""Command line interface for dirbuf."""
