"""dirbuf kernel: domain models, ports, errors, logging and configuration.

Concrete adapters live in :mod:`dirbuf.drivers`.
"""
