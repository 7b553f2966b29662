#!/usr/bin/env python3
"""Entry point for the dirbuf CLI when run as python -m dirbuf.cli."""

if __name__ == "__main__":
    from dirbuf.cli.main import main

    main()
