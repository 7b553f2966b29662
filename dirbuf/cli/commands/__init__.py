"""dirbuf CLI commands."""
