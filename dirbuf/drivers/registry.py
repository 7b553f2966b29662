"""Scheme-to-adapter registry.

Routes urls to the registered adapter whose scheme prefixes them, using
longest-prefix matching so ``dirbuf-ssh://`` and ``dirbuf://`` can coexist.

Example
-------
.. code-block:: python

    registry = AdapterRegistry()
    registry.register("dirbuf://", FilesAdapter(cache, registry=registry))
    registry.get_adapter_by_scheme("dirbuf:///tmp/")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from dirbuf.kernel.exceptions import ResourceNotFoundError
from dirbuf.kernel.logging import get_logger

if TYPE_CHECKING:
    from dirbuf.kernel.ports.adapter import Adapter

logger = get_logger(__name__)


class AdapterRegistry:
    """In-process scheme table implementing the AdapterLookup port."""

    def __init__(self) -> None:
        self._adapters: dict[str, Adapter] = {}

    def register(self, scheme: str, adapter: Adapter) -> None:
        """Register ``adapter`` for urls starting with ``scheme``.

        Args
        ----
            scheme: Url scheme including ``://`` (e.g. ``dirbuf://``).
            adapter: The adapter handling that scheme.
        """
        if not scheme.endswith("://"):
            msg = f"Scheme must end with '://': {scheme!r}"
            raise ValueError(msg)
        self._adapters[scheme] = adapter
        logger.debug("Registered adapter {name} for {scheme}", name=adapter.name, scheme=scheme)

    def schemes(self) -> dict[str, Adapter]:
        """Return a copy of the scheme table."""
        return dict(self._adapters)

    def get_adapter_by_scheme(self, url: str) -> Adapter | None:
        best_scheme = ""
        best_adapter: Adapter | None = None
        for scheme, adapter in self._adapters.items():
            if url.startswith(scheme) and len(scheme) > len(best_scheme):
                best_scheme = scheme
                best_adapter = adapter
        return best_adapter

    def require_adapter(self, url: str) -> Adapter:
        """Like :meth:`get_adapter_by_scheme` but raises when nothing matches.

        Raises
        ------
        ResourceNotFoundError
            If no registered scheme prefixes ``url``.
        """
        adapter = self.get_adapter_by_scheme(url)
        if adapter is None:
            raise ResourceNotFoundError("adapter", url, sorted(self._adapters))
        return adapter


__all__ = ["AdapterRegistry"]
