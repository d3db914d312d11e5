# symbols.py - alphabet of the character model and the fixed-width lookbehind token

from __future__ import annotations
from enum import Enum
from typing import Iterator, Sequence, Tuple, Union


class Sentinel(Enum):
    """Structural markers. Never emitted in generated text."""
    START = "start"
    END = "end"
    NULL = "null"

    def __repr__(self) -> str:
        return f"<{self.name}>"


START = Sentinel.START
END = Sentinel.END
NULL = Sentinel.NULL

# a symbol is either a sentinel or a single character
Symbol = Union[Sentinel, str]
Token = Tuple[Symbol, ...]


def is_char(symbol: Symbol) -> bool:
    return not isinstance(symbol, Sentinel)


def symbol_sequence(text: str) -> Iterator[Symbol]:
    """Yields START, every character of text, then END."""
    yield START
    yield from text
    yield END


def make_token(context: Sequence[Symbol], order: int) -> Token:
    """
    Build the lookup key for the next symbol.
    Keeps the last `order` symbols of context, left-padded with NULL so the
    token is always exactly `order` wide.
    """
    window = tuple(context[-order:]) if context else ()
    return (NULL,) * (order - len(window)) + window
