"""
markov_chatter

A chat bot that imitates its channels and members with bounded,
character-level markov chains.
"""

from .core import MarkovChain, MarkovConfig
from .bot import ChatMessage, MessageHandler, Reply

__all__ = ["MarkovChain", "MarkovConfig", "ChatMessage", "MessageHandler", "Reply"]

__version__ = "0.1.0"
