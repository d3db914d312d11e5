# markov_chatter/bot/handler.py
"""
MessageHandler
Decides, for every incoming chat message, whether to learn from it or to
answer with generated text.
 - "usim <@id>" answers with text generated from that user's chain
 - the trigger phrase answers from the channel's chain
 - anything else is learned by the channel and the author, and the channel
   chain occasionally speaks up on its own
Delivery goes through a MessageSink; the transport itself lives elsewhere.
"""

from __future__ import annotations

from dataclasses import dataclass
import random
import re
import time
from typing import Hashable, Optional

from ..core.markov_chain import MarkovChain
from ..core.protocols import MessageSink
from ..utils.config_manager import Config
from ..utils.logger_utils import log
from ..utils.metrics_tracker import Metrics
from .registry import ChainRegistry

_USER_ID = re.compile(r"\+?[0-9]+")
_MAX_USER_ID = 2 ** 64 - 1


@dataclass(frozen=True)
class ChatMessage:
    channel_id: Hashable
    author_id: Hashable
    content: str
    in_guild: bool = True
    author_is_bot: bool = False


@dataclass(frozen=True)
class Reply:
    channel_id: Hashable
    text: str
    source: str  # "mimic", "trigger" or "chance"


def parse_mention(target: str) -> Optional[int]:
    """
    '<@123>', '<@!123>' or a bare '123' -> 123; anything else -> None.
    Ids are unsigned 64-bit and surrounding whitespace is not accepted.
    """
    cleaned = target.replace("!", "").replace("<@", "").replace(">", "")
    if not _USER_ID.fullmatch(cleaned):
        return None
    user = int(cleaned)
    return user if user <= _MAX_USER_ID else None


class MessageHandler:
    """
    Owns one chain registry for channels and one for members.
    handle() applies the rules and returns the reply (if any);
    on_message() additionally hands that reply to the sink.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        *,
        sink: Optional[MessageSink] = None,
        rng: Optional[random.Random] = None,
        metrics: Optional[Metrics] = None,
    ) -> None:
        self.cfg = config or Config()
        self.sink = sink
        self.metrics = metrics or Metrics()
        self._rng = rng or random.Random()
        self._markov_cfg = self.cfg.markov_config()
        self.channels = ChainRegistry(self._new_chain, name="channels")
        self.members = ChainRegistry(self._new_chain, name="members")

    def _new_chain(self) -> MarkovChain:
        # each chain gets its own generator seeded from ours so a seeded run is reproducible
        return MarkovChain(self._markov_cfg, rng=random.Random(self._rng.getrandbits(64)))

    # Rules -----------------------------------------------------------------------
    def handle(self, msg: ChatMessage) -> Optional[Reply]:
        if not msg.in_guild or msg.author_is_bot:
            return None

        prefix = self.cfg["mimic_prefix"]
        if prefix and msg.content.startswith(prefix):
            return self._mimic(msg, msg.content[len(prefix):])

        trigger = self.cfg["trigger_phrase"]
        if trigger and msg.content.lower().startswith(trigger.lower()):
            text = self._generate(self.channels, msg.channel_id)
            if text is None:
                log.debug(f"[handler] trigger in unknown channel {msg.channel_id}")
                return None
            return Reply(msg.channel_id, text, "trigger")

        self._digest(self.channels, msg.channel_id, msg.content)

        reply = None
        if self._rng.random() < self.cfg["reply_chance"]:
            text = self._generate(self.channels, msg.channel_id)
            if text is not None:
                reply = Reply(msg.channel_id, text, "chance")

        self._digest(self.members, msg.author_id, msg.content)
        return reply

    def _mimic(self, msg: ChatMessage, target: str) -> Optional[Reply]:
        user = parse_mention(target)
        if user is None:
            log.debug(f"[handler] ignoring mimic request for '{target}'")
            return None
        text = self._generate(self.members, user)
        if text is None:
            log.debug(f"[handler] no chain for user {user}")
            return None
        return Reply(msg.channel_id, text, "mimic")

    def _digest(self, registry: ChainRegistry, key: Hashable, text: str) -> None:
        t0 = time.perf_counter()
        registry.digest(key, text)
        self.metrics.record(f"{registry.name}.digest_time", time.perf_counter() - t0)

    def _generate(self, registry: ChainRegistry, key: Hashable) -> Optional[str]:
        t0 = time.perf_counter()
        text = registry.generate(key)
        if text is not None:
            self.metrics.record(f"{registry.name}.generate_time", time.perf_counter() - t0)
        return text

    # Delivery --------------------------------------------------------------------
    def on_message(self, msg: ChatMessage) -> Optional[Reply]:
        """Handle a message and deliver the reply; delivery errors are logged, not raised."""
        reply = self.handle(msg)
        if reply is None or self.sink is None:
            return reply
        try:
            self.sink.send(reply.channel_id, reply.text)
        except Exception as e:
            log.error(f"Failed to send message: {e}")
            self.metrics.record("send_failures")
        return reply
