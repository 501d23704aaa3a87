"""Per-channel serialization of payment-triggering calls."""

from __future__ import annotations

import asyncio
import weakref


class ChannelLockRegistry:
    """Hands out one ``asyncio.Lock`` per ``(sender, receiver)`` pair.

    Two concurrent paid calls on the same channel would otherwise both read
    the same server balance and sign competing proofs, so one of the payments
    would be lost. Holding the pair's lock from channel setup until the paid
    retry has been answered keeps balance updates strictly ordered.

    Locks are kept per running event loop, since an ``asyncio.Lock`` can only
    be waited on from the loop it first bound to. Must be called from inside
    a coroutine.
    """

    def __init__(self) -> None:
        self._locks: weakref.WeakKeyDictionary[
            asyncio.AbstractEventLoop, dict[tuple[str, str], asyncio.Lock]
        ] = weakref.WeakKeyDictionary()

    def for_channel(self, sender_address: str, receiver_address: str) -> asyncio.Lock:
        loop = asyncio.get_running_loop()
        loop_locks = self._locks.get(loop)
        if loop_locks is None:
            loop_locks = {}
            self._locks[loop] = loop_locks
        key = (sender_address.lower(), receiver_address.lower())
        lock = loop_locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            loop_locks[key] = lock
        return lock


# Shared by every client in the process unless one is injected.
default_channel_locks = ChannelLockRegistry()
