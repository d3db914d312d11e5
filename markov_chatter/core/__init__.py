"""
markov_chatter.core

The bounded character-level markov model:
 - symbols and fixed-width lookbehind tokens
 - per-token transition counts with weighted sampling
 - the chain itself (digest / generate with a rolling input window)
"""

from .errors import EmptyEntryError, MarkovError
from .markov_chain import MarkovChain, MarkovConfig
from .symbols import END, NULL, START, Sentinel, make_token, symbol_sequence
from .transition_table import TransitionEntry

__all__ = [
    "MarkovChain",
    "MarkovConfig",
    "TransitionEntry",
    "Sentinel",
    "START",
    "END",
    "NULL",
    "make_token",
    "symbol_sequence",
    "MarkovError",
    "EmptyEntryError",
]
