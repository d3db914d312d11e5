"""
markov_chatter.bot

Chat-facing layer around the markov core: per-channel and per-author chain
registries and the message rules that feed and query them.
"""

from .handler import ChatMessage, MessageHandler, Reply, parse_mention
from .registry import ChainRegistry

__all__ = ["ChatMessage", "MessageHandler", "Reply", "parse_mention", "ChainRegistry"]
