"""In-process mutual exclusion for order and stock mutations.

Each key (a customer, an order, a stocked item) maps to one re-entrant lock.
Holders acquire their keys in sorted order so two callers needing
overlapping key sets cannot deadlock. A key's lock lives only while some
thread holds or waits for it.

Commands go through ``dispatch``, which takes the command's keys before
Protean opens the handler's unit of work and releases them after it has
committed. Each command module registers its keys with ``lock_keys``.
"""

from collections.abc import Iterable, Iterator
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from functools import singledispatch
from threading import Lock, RLock

from protean.utils.globals import current_domain


@dataclass
class _Entry:
    lock: RLock = field(default_factory=RLock)
    users: int = 0  # holders plus waiters


class KeyedLocks:
    """A registry of re-entrant locks, created on first use and dropped on last release."""

    def __init__(self) -> None:
        self._guard = Lock()
        self._entries: dict[str, _Entry] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)

    def _checkout(self, key: str) -> RLock:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = _Entry()
            entry.users += 1
            return entry.lock

    def _checkin(self, key: str) -> None:
        with self._guard:
            entry = self._entries[key]
            entry.users -= 1
            if entry.users == 0:
                del self._entries[key]

    @contextmanager
    def hold(self, *keys: str) -> Iterator[None]:
        with ExitStack() as stack:
            for key in sorted(set(keys)):
                lock = self._checkout(key)
                stack.callback(self._checkin, key)
                lock.acquire()
                stack.callback(lock.release)
            yield


locks = KeyedLocks()


def customer_key(customer_id) -> str:
    return f"customer:{customer_id}"


def order_key(order_id) -> str:
    return f"order:{order_id}"


def item_key(item_id) -> str:
    return f"item:{item_id}"


@singledispatch
def lock_keys(command) -> Iterable[str]:
    """Keys ``command`` must hold while it is processed. None unless registered."""
    return ()


def dispatch(command):
    """Process ``command`` synchronously while holding its lock keys.

    Keys read from stored state (the items of an order, say) are computed
    again once held. If they changed in between, the locks are dropped and
    taken afresh, so the handler always runs under the keys it needs.
    """
    while True:
        keys = set(lock_keys(command))
        with locks.hold(*keys):
            if set(lock_keys(command)) <= keys:
                return current_domain.process(command, asynchronous=False)
