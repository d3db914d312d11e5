# markov_chatter/core/protocols.py
"""
Protocol interfaces shared by the chat layer and its collaborators.

The registry and handler depend on these rather than on concrete classes so
tests can pass in fakes, and a real transport only has to provide `send`.
"""

from __future__ import annotations

from typing import Hashable, Protocol, runtime_checkable


@runtime_checkable
class ChainProtocol(Protocol):
    """Minimal interface of a text model driven by the chat layer."""

    def digest(self, text: str) -> None:
        ...

    def generate(self) -> str:
        ...


@runtime_checkable
class MessageSink(Protocol):
    """Delivers a generated reply back to the channel it was requested in."""

    def send(self, channel_id: Hashable, text: str) -> None:
        ...
