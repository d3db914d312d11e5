# markov_chain.py
# bounded, reversible order-N character markov model.

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, replace
import random
from typing import Deque, Dict, Iterator, List, Optional, Tuple

from .symbols import END, NULL, START, Symbol, Token, is_char, make_token, symbol_sequence
from .transition_table import TransitionEntry
from ..utils.logger_utils import log


@dataclass(frozen=True)
class MarkovConfig:
    """
    Knobs for one chain.
    order      - lookbehind width of a token
    cache_size - number of most recent inputs whose transitions are kept
    max_steps  - cap on NULL fillers appended by a single generate() walk
    """
    order: int = 5
    cache_size: int = 1000
    max_steps: int = 4096

    def __post_init__(self) -> None:
        if self.order < 1:
            raise ValueError(f"order must be >= 1, got {self.order}")
        if self.cache_size < 1:
            raise ValueError(f"cache_size must be >= 1, got {self.cache_size}")
        if self.max_steps < 1:
            raise ValueError(f"max_steps must be >= 1, got {self.max_steps}")


class MarkovChain:
    """
    Character-level markov chain over a rolling window of input strings.

    The table always equals the result of digesting exactly the strings in
    `history`, oldest first. Once more than `cache_size` strings have been
    digested the oldest is dropped and its transitions are subtracted again,
    so memory and behaviour stay bounded.

    Not thread safe: callers serialise digest/generate on one instance
    (see bot.registry.ChainRegistry).
    """

    def __init__(
        self,
        config: Optional[MarkovConfig] = None,
        *,
        rng: Optional[random.Random] = None,
        **overrides,
    ) -> None:
        base = config or MarkovConfig()
        if overrides:
            base = replace(base, **overrides)
        self.cfg = base
        self._rng = rng or random.Random()
        # token -> next symbol counts
        self._table: Dict[Token, TransitionEntry] = {}
        # digested inputs, oldest first
        self._history: Deque[str] = deque()

    @property
    def order(self) -> int:
        return self.cfg.order

    @property
    def cache_size(self) -> int:
        return self.cfg.cache_size

    @property
    def history(self) -> Tuple[str, ...]:
        return tuple(self._history)

    # ------------------------------------------------------------------
    # Learning
    # ------------------------------------------------------------------
    def _transitions(self, text: str) -> Iterator[Tuple[Token, Symbol]]:
        """Every (token, next symbol) pair of START + text + END."""
        n = self.cfg.order
        symbols = list(symbol_sequence(text))
        for i in range(1, len(symbols)):
            yield make_token(symbols[max(0, i - n):i], n), symbols[i]

    def digest(self, text: str) -> None:
        """Learn one string, evicting the oldest one if the window is full."""
        for token, symbol in self._transitions(text):
            entry = self._table.get(token)
            if entry is None:
                entry = self._table[token] = TransitionEntry()
            entry.insert(symbol)

        self._history.append(text)
        if len(self._history) > self.cfg.cache_size:
            oldest = self._history.popleft()
            self._undigest(oldest)
            log.debug(f"[markov] evicted {len(oldest)} chars, history={len(self._history)}")

    def _undigest(self, text: str) -> None:
        """Exact inverse of the table update done by digest()."""
        for token, symbol in self._transitions(text):
            entry = self._table.get(token)
            if entry is None:
                continue
            entry.remove(symbol)
            # empty entries are dropped so generate never samples one
            if entry.is_empty():
                del self._table[token]

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------
    def generate(self) -> str:
        """
        Random walk from START until END is sampled.
        An unseen token appends a NULL filler and the walk carries on. Learned
        transitions always lead to stored tokens, so only fillers count against
        max_steps; past it the walk returns what it has so far.
        """
        if not self._table:
            return ""

        n = self.cfg.order
        symbols: List[Symbol] = [START]
        misses = 0
        while symbols[-1] is not END:
            if misses >= self.cfg.max_steps:
                log.warning(f"[markov] walk hit max_steps={self.cfg.max_steps} unseen tokens, output truncated")
                break
            token = make_token(symbols[-n:], n)
            entry = self._table.get(token)
            if entry is not None:
                symbols.append(entry.weighted_random(self._rng))
            else:
                symbols.append(NULL)
                misses += 1

        return "".join(s for s in symbols if is_char(s))

    # ------------------------------------------------------------------
    # Introspection helpers
    # ------------------------------------------------------------------
    def entry(self, token: Token) -> Optional[TransitionEntry]:
        return self._table.get(tuple(token))

    def snapshot(self) -> Dict[Token, Dict[Symbol, int]]:
        """Copy of the table as plain dicts, for comparisons."""
        return {token: entry.as_dict() for token, entry in self._table.items()}

    def stats(self) -> Dict[str, int]:
        return {
            "tokens": len(self._table),
            "transitions": sum(e.total for e in self._table.values()),
            "history": len(self._history),
            "cache_size": self.cfg.cache_size,
            "order": self.cfg.order,
        }

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        return (f"MarkovChain(order={self.cfg.order}, cache_size={self.cfg.cache_size}, "
                f"tokens={len(self._table)}, history={len(self._history)})")
