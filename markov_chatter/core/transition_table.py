# transition_table.py - next-symbol counts for one token

from __future__ import annotations
from collections import Counter
import random
from typing import Dict, Iterator, Optional

from .errors import EmptyEntryError
from .symbols import Symbol


class TransitionEntry:
    """
    Multiset of symbols observed after one token.
    `total` is kept equal to the sum of all counts; a symbol whose count
    drops to zero is removed from the mapping.
    """

    __slots__ = ("_counts", "total")

    def __init__(self) -> None:
        self._counts: Counter = Counter()
        self.total: int = 0

    def insert(self, symbol: Symbol) -> None:
        self._counts[symbol] += 1
        self.total += 1

    def remove(self, symbol: Symbol) -> None:
        count = self._counts.get(symbol)
        if not count:
            return
        if count > 1:
            self._counts[symbol] = count - 1
        else:
            del self._counts[symbol]
        self.total -= 1

    def weighted_random(self, rng: Optional[random.Random] = None) -> Symbol:
        """
        Pick a symbol with probability proportional to its count.
        Draws from [1, total] and walks the counts until the draw is used up.
        """
        if self.total <= 0:
            raise EmptyEntryError("cannot sample from an empty transition entry")

        weight = (rng or random).randint(1, self.total)
        for symbol, count in self._counts.items():
            weight -= count
            if weight <= 0:
                return symbol

        # total out of sync with the counts
        raise EmptyEntryError(f"entry total {self.total} exceeds its counts")

    # Introspection ---------------------------------------------------------------
    def count(self, symbol: Symbol) -> int:
        return self._counts.get(symbol, 0)

    def is_empty(self) -> bool:
        return self.total == 0

    def as_dict(self) -> Dict[Symbol, int]:
        return dict(self._counts)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._counts

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    def __repr__(self) -> str:
        return f"TransitionEntry(total={self.total}, counts={dict(self._counts)!r})"
