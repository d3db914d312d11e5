"""
registry.py
Per-entity store of markov chains (one per channel, one per author).

Map access and chain access are locked separately: the registry lock is only
held while looking up or creating a slot, and each chain has its own lock
held for one digest or one generate. Chains of different keys never block
each other.
"""

from __future__ import annotations
from contextlib import contextmanager
import threading
from typing import Callable, Dict, Hashable, Iterator, List, Optional

from ..core.protocols import ChainProtocol


class _Slot:
    __slots__ = ("chain", "lock")

    def __init__(self, chain: ChainProtocol) -> None:
        self.chain = chain
        self.lock = threading.Lock()


class ChainRegistry:
    """
    Lazily created chains keyed by an arbitrary hashable id.
    Public API:
      locked(key, create)   context manager yielding the chain (or None)
      digest(key, text)
      generate(key)         None when the key has never been digested
      get(key), keys(), len(), `key in registry`
    """

    def __init__(self, factory: Callable[[], ChainProtocol], name: str = "chains") -> None:
        self._factory = factory
        self.name = name
        self._slots: Dict[Hashable, _Slot] = {}
        self._lock = threading.Lock()

    def _slot(self, key: Hashable, create: bool) -> Optional[_Slot]:
        with self._lock:
            slot = self._slots.get(key)
            if slot is None and create:
                slot = self._slots[key] = _Slot(self._factory())
            return slot

    @contextmanager
    def locked(self, key: Hashable, create: bool = False) -> Iterator[Optional[ChainProtocol]]:
        """Hold the chain's own lock for the duration of the block."""
        slot = self._slot(key, create)
        if slot is None:
            yield None
            return
        with slot.lock:
            yield slot.chain

    def digest(self, key: Hashable, text: str) -> None:
        with self.locked(key, create=True) as chain:
            chain.digest(text)

    def generate(self, key: Hashable) -> Optional[str]:
        with self.locked(key) as chain:
            if chain is None:
                return None
            return chain.generate()

    # Introspection ---------------------------------------------------------------
    def get(self, key: Hashable) -> Optional[ChainProtocol]:
        slot = self._slot(key, create=False)
        return slot.chain if slot else None

    def keys(self) -> List[Hashable]:
        with self._lock:
            return list(self._slots)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._slots

    def __len__(self) -> int:
        with self._lock:
            return len(self._slots)
