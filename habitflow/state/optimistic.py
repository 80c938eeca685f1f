"""Local-first mutations with server reconciliation.

A mutation works on one slice of state reached through ``read``/``write``.
The slice is deep-copied as a snapshot, the local change is written before
the remote call suspends, and the snapshot is written back if the call
fails. Mutations sharing a key run one after another; the second one
snapshots whatever the first left behind, so a late rollback can never
overwrite a newer optimistic value.
"""
from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any, Awaitable, Callable, Dict, Hashable, List, Optional

logger = logging.getLogger(__name__)


class OptimisticMutationController:
    def __init__(self, on_change: Optional[Callable[[str], None]] = None):
        self._on_change = on_change
        self._locks: Dict[Hashable, asyncio.Lock] = {}
        self._users: Dict[Hashable, int] = {}

    def in_flight(self, key: Hashable) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    def pending_keys(self) -> List[Hashable]:
        return [key for key, lock in self._locks.items() if lock.locked()]

    def _changed(self, reason):
        if self._on_change is not None:
            self._on_change(reason)

    async def mutate(
        self,
        key: Hashable,
        *,
        read: Callable[[], Any],
        write: Callable[[Any], None],
        op: Callable[[], Awaitable[Any]],
        apply: Optional[Callable[[Any], Any]] = None,
        reconcile: Optional[Callable[[Any], Any]] = None,
        guard: Optional[Callable[[], None]] = None,
        label: str = "mutation",
    ) -> Any:
        """Run one optimistic transaction.

        ``guard`` runs once the key is free and may raise to abort before
        anything changes. ``apply`` receives a private copy of the snapshot
        and returns the optimistic value; leave it out for operations with
        no local guess. ``reconcile`` maps the server result to the value
        written on success.
        """
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                if guard is not None:
                    guard()
                snapshot = copy.deepcopy(read())
                if apply is not None:
                    write(apply(copy.deepcopy(snapshot)))
                    self._changed(label)
                try:
                    result = await op()
                except BaseException as exc:
                    if apply is not None:
                        write(snapshot)
                        self._changed(f"{label}.rollback")
                    logger.warning("%s for %r failed: %s", label, key, exc)
                    raise
                if reconcile is not None:
                    write(reconcile(result))
                    self._changed(label)
                return result
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                del self._locks[key]
