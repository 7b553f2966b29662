"""Applies a batch of actions across adapters.

Each action goes to the adapter owning its url (move/copy: the source url).
Actions run strictly in the given order; the first failure stops the batch
and nothing already applied is rolled back.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

from dirbuf.kernel.domain.actions import action_url
from dirbuf.kernel.exceptions import ActionFailedError, DirbufError, ResourceNotFoundError
from dirbuf.kernel.logging import get_logger
from dirbuf.kernel.utils.urls import get_scheme

if TYPE_CHECKING:
    from dirbuf.kernel.domain.actions import Action
    from dirbuf.kernel.ports.adapter import Adapter, AdapterLookup

logger = get_logger(__name__)

# Called as on_progress(done, total) after each successful action
ProgressCallback = Callable[[int, int], None]


def _adapter_for(action: Action, lookup: AdapterLookup) -> Adapter:
    url = action_url(action)
    adapter = lookup.get_adapter_by_scheme(url)
    if adapter is None:
        raise ResourceNotFoundError("adapter", get_scheme(url) or url)
    return adapter


def render_actions(actions: Sequence[Action], lookup: AdapterLookup) -> list[str]:
    """Preview lines for ``actions``, in order."""
    return [_adapter_for(action, lookup).render_action(action) for action in actions]


async def aperform_actions(
    actions: Sequence[Action],
    lookup: AdapterLookup,
    on_progress: ProgressCallback | None = None,
) -> None:
    """Perform ``actions`` one at a time, stopping at the first failure.

    Raises
    ------
    ActionFailedError
        Wrapping the failure of the action at ``index``; actions after it
        were not attempted.
    """
    total = len(actions)
    for index, action in enumerate(actions):
        try:
            adapter = _adapter_for(action, lookup)
            await adapter.aperform_action(action)
        except DirbufError as e:
            raise ActionFailedError(index, action, e) from e
        logger.debug("Action {done}/{total} done", done=index + 1, total=total)
        if on_progress is not None:
            on_progress(index + 1, total)


__all__ = ["ProgressCallback", "aperform_actions", "render_actions"]
