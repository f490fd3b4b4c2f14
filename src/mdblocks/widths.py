"""Per-group code width registry for rendering layers.

A rendering layer measures the widest single line of each code chunk and
wants every chunk of the same code group to share that width, so that the
chunks scroll and align as one.  :class:`CodeWidthRegistry` stores one
width per ``codeBlockGroupId``: the first measurement wins, and only a
measurement wider by more than :data:`WIDTH_TOLERANCE` replaces it.

Registries are independent objects; share one between the widgets of a
view rather than relying on a process-wide instance.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable

from mdblocks.models import Block

WIDTH_TOLERANCE: float = 0.5

Listener = Callable[[], None]


class CodeWidthRegistry:
    """Thread-safe store of the maximum line width per code group.

    Listeners registered for a group are called, outside the lock, each
    time the group's stored width changes or is cleared.
    """

    __slots__ = ("_listeners", "_lock", "_widths")

    def __init__(self) -> None:
        self._widths: dict[str, float] = {}
        self._listeners: dict[str, list[Listener]] = {}
        self._lock = threading.Lock()

    # -- queries -------------------------------------------------------------

    def get_group_width(self, group_id: str) -> float | None:
        with self._lock:
            return self._widths.get(group_id)

    @property
    def group_ids(self) -> list[str]:
        """Ids of every group that currently has a stored width."""
        with self._lock:
            return list(self._widths)

    # -- listeners -----------------------------------------------------------

    def add_group_listener(self, group_id: str, listener: Listener) -> None:
        with self._lock:
            self._listeners.setdefault(group_id, []).append(listener)

    def remove_group_listener(self, group_id: str, listener: Listener) -> None:
        with self._lock:
            listeners = self._listeners.get(group_id)
            if listeners is None:
                return
            if listener in listeners:
                listeners.remove(listener)
            if not listeners:
                del self._listeners[group_id]

    # -- updates -------------------------------------------------------------

    def update_width(self, group_id: str, width: float) -> bool:
        """Store *width* if it is the first, or wider than the stored one
        by more than :data:`WIDTH_TOLERANCE`.

        Returns
        -------
        bool
            ``True`` if the stored width changed (listeners were notified).
        """
        with self._lock:
            current = self._widths.get(group_id)
            if current is not None and width <= current + WIDTH_TOLERANCE:
                return False
            self._widths[group_id] = width
            listeners = self._snapshot(group_id)
        _notify(listeners)
        return True

    def force_update_width(self, group_id: str, width: float) -> None:
        """Store *width* even if it is narrower than the stored width."""
        with self._lock:
            if self._widths.get(group_id) == width:
                return
            self._widths[group_id] = width
            listeners = self._snapshot(group_id)
        _notify(listeners)

    def reset_group_width(self, group_id: str) -> None:
        """Forget the stored width so listeners re-measure.  Listeners stay
        registered."""
        with self._lock:
            self._widths.pop(group_id, None)
            listeners = self._snapshot(group_id)
        _notify(listeners)

    def clear_group(self, group_id: str) -> None:
        """Forget the stored width, notify, then drop the group's listeners."""
        with self._lock:
            self._widths.pop(group_id, None)
            listeners = self._snapshot(group_id)
            self._listeners.pop(group_id, None)
        _notify(listeners)

    def seed_from_blocks(
        self,
        blocks: Iterable[Block],
        measure: Callable[[str], float] = len,
    ) -> int:
        """Seed group widths from precomputed ``fullCodeLongestLine`` meta.

        Only the first chunk of each group is measured, so no chunk text is
        re-scanned.  *measure* maps a line to a width; the default counts
        characters.

        Returns
        -------
        int
            Number of groups whose stored width changed.
        """
        changed = 0
        for block in blocks:
            meta = block.meta or {}
            if not block.is_code_block or not meta.get("isFirstInGroup"):
                continue
            group_id = meta.get("codeBlockGroupId")
            if group_id is None:
                continue
            width = float(measure(meta.get("fullCodeLongestLine", "")))
            if self.update_width(group_id, width):
                changed += 1
        return changed

    def _snapshot(self, group_id: str) -> list[Listener]:
        return list(self._listeners.get(group_id, ()))


def _notify(listeners: list[Listener]) -> None:
    for listener in listeners:
        listener()
