"""Concrete adapters and collaborators for dirbuf ports."""
