# tests/conftest.py
import random

import pytest

from markov_chatter.core.markov_chain import MarkovChain
from markov_chatter.utils.config_manager import Config


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def chain2(rng):
    """Order-2 chain with a seeded generator."""
    return MarkovChain(order=2, rng=rng)


@pytest.fixture
def quiet_config():
    """In-memory config where the bot never speaks up on its own."""
    cfg = Config()
    cfg.set("reply_chance", 0.0)
    return cfg


@pytest.fixture(autouse=True)
def restore_log():
    """The CLI reconfigures the shared logger; put it back after every test."""
    from markov_chatter.utils.logger_utils import log
    saved = (log.path, log.use_color, log.level)
    yield
    log.path, log.use_color, log.level = saved
