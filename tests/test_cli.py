# tests/test_cli.py
import io
import random

import pytest
from rich.console import Console

from markov_chatter.bot.handler import ChatMessage, MessageHandler
from markov_chatter.cli import cli as cli_mod
from markov_chatter.cli.cli import CLI, main, read_chat_log


@pytest.fixture
def out():
    return Console(file=io.StringIO(), width=120)


@pytest.fixture
def app(quiet_config, out):
    return CLI(MessageHandler(quiet_config, rng=random.Random(2)), out=out)


def text_of(console):
    return console.file.getvalue()


def test_read_chat_log_parses_tab_separated_lines():
    lines = ["# comment\n", "\n", "general\t1\thello there\n", "bad line\n", "7\tbob\ttab\tinside\n",
             "²\tbob\thello\n"]
    msgs = list(read_chat_log(lines))
    assert [(m.channel_id, m.author_id, m.content) for m in msgs] == [
        ("general", 1, "hello there"),
        (7, "bob", "tab\tinside"),
        # superscript digits are not numbers to int(), so they stay strings
        ("²", "bob", "hello"),
    ]


def test_messages_then_gen_and_usim(app):
    app.send("hello there")
    app.handle_command("/gen")
    app.handle_command("/usim 1")
    assert app.sink.sent == [("general", "hello there"), ("general", "hello there")]


def test_switching_channel_and_user(app, out):
    app.handle_command("/channel 5")
    app.handle_command("/user 9")
    app.send("abc")
    assert app.handler.channels.get(5).history == ("abc",)
    assert app.handler.members.get(9).history == ("abc",)
    app.handle_command("/gen general")
    assert "No chain for #general" in text_of(out)


def test_unknown_command(app, out):
    app.handle_command("/dance")
    assert "Unknown command" in text_of(out)


def test_tables(app, out):
    app.send("hello")
    app.handle_command("/chains")
    app.handle_command("/stats")
    shown = text_of(out)
    assert "channels" in shown and "members" in shown
    assert "channels.digest_time" in shown


def test_replay_file(app, tmp_path, out):
    log_file = tmp_path / "chat.tsv"
    log_file.write_text("general\t1\tgood morning\ngeneral\t2\thi markov\n", encoding="utf-8")
    assert app.replay_file(str(log_file)) == 2
    assert app.sink.sent == [("general", "good morning")]
    assert app.replay_file(str(tmp_path / "missing.tsv")) is None
    assert "Cannot read" in text_of(out)


def test_run_loop_until_eof(app, monkeypatch):
    lines = iter(["hello", "", "/gen"])

    def fake_ask(*a, **kw):
        try:
            return next(lines)
        except StopIteration:
            raise EOFError

    monkeypatch.setattr(cli_mod.Prompt, "ask", fake_ask)
    app.run()
    assert not app.running
    assert app.sink.sent == [("general", "hello")]


def test_main_replay(tmp_path, capsys):
    log_file = tmp_path / "chat.tsv"
    log_file.write_text("42\t1\tbeep boop\n42\t3\thi markov\n", encoding="utf-8")
    assert main(["--replay", str(log_file), "--reply-chance", "0", "--seed", "3", "--no-color"]) == 0
    assert "beep boop" in capsys.readouterr().out


def test_main_exit_codes(tmp_path):
    assert main(["--replay", str(tmp_path / "nope.tsv"), "--no-color"]) == 1
    assert main(["--order", "0"]) == 2


def test_main_log_file(tmp_path):
    log_file = tmp_path / "chat.tsv"
    log_file.write_text("42\t1\tbeep\n", encoding="utf-8")
    out_log = tmp_path / "bot.log"
    assert main(["--replay", str(log_file), "--log-level", "debug", "--log-file", str(out_log), "--no-color"]) == 0
    assert "replay done" in out_log.read_text(encoding="utf-8")


def test_odd_digit_ids_stay_strings(app):
    app.handle_command("/channel ²")
    app.handle_command("/user ³")
    app.send("hey")
    assert app.handler.channels.get("²").history == ("hey",)
    assert app.handler.members.get("³").history == ("hey",)


def test_parallel_replay_keeps_channel_order(app):
    msgs = [ChatMessage(f"c{i % 3}", i % 2, f"message {i}") for i in range(30)]
    msgs += [ChatMessage(f"c{i}", 9, "hi markov") for i in range(3)]
    assert app.replay(msgs, workers=3) == 33
    for i in range(3):
        expected = tuple(f"message {j}" for j in range(30) if j % 3 == i)
        assert app.handler.channels.get(f"c{i}").history == expected
    # each member got every one of their messages, whatever the interleaving
    assert sorted(app.handler.members.get(0).history) == sorted(f"message {j}" for j in range(0, 30, 2))
    assert sorted(ch for ch, _ in app.sink.sent) == ["c0", "c1", "c2"]


def test_main_parallel_replay(tmp_path, capsys):
    log_file = tmp_path / "chat.tsv"
    log_file.write_text("a\t1\tone\nb\t2\ttwo\na\t1\thi markov\n", encoding="utf-8")
    assert main(["--replay", str(log_file), "--workers", "2", "--reply-chance", "0", "--no-color"]) == 0
    assert "Replayed 3 messages" in capsys.readouterr().out
