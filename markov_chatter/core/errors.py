# errors.py - exceptions raised by the markov core


class MarkovError(Exception):
    """Base class for markov model errors."""


class EmptyEntryError(MarkovError):
    """Sampling was attempted on a transition entry with no observations."""
