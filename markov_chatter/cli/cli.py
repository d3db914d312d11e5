"""
cli.py - terminal front end for the markov chat bot
Features:
- Interactive chat: every line is a message from the current user in the current channel
- Replay of tab-separated chat logs through the same message rules
- Generated replies shown in panels, chain statistics in tables
- Uses Rich for tables and formatting
"""

import argparse
import random
import sys
from collections import defaultdict
from typing import Dict, Hashable, Iterable, List, Optional, Tuple

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table
from rich.text import Text

from markov_chatter.bot.handler import ChatMessage, MessageHandler, parse_mention
from markov_chatter.utils.config_manager import Config
from markov_chatter.utils.logger_utils import log
from markov_chatter.utils.threaded_runner import run_keyed

console = Console()


class ConsoleSink:
    """MessageSink printing replies to the terminal."""

    def __init__(self, out: Console):
        self.out = out
        self.sent: List[Tuple[Hashable, str]] = []

    def send(self, channel_id, text: str) -> None:
        self.sent.append((channel_id, text))
        body = Text(text) if text else Text("(empty)", style="dim")
        self.out.print(Panel(body, title=f"#{channel_id}", border_style="magenta"))


def _as_id(raw: str) -> Hashable:
    """Numeric ids become ints so '/usim 42' finds the chain learned for user 42."""
    raw = raw.strip()
    # isdigit() also accepts "²", which int() rejects
    return int(raw) if raw.isdecimal() else raw


def read_chat_log(lines: Iterable[str]) -> Iterable[ChatMessage]:
    """
    Parse 'channel<TAB>author<TAB>text' lines.
    Blank lines and lines starting with '#' are skipped, malformed ones are logged.
    """
    for n, line in enumerate(lines, 1):
        line = line.rstrip("\n")
        if not line.strip() or line.startswith("#"):
            continue
        parts = line.split("\t", 2)
        if len(parts) != 3:
            log.warning(f"[replay] line {n}: expected channel<TAB>author<TAB>text")
            continue
        channel, author, text = parts
        yield ChatMessage(_as_id(channel), _as_id(author), text)


class CLI:
    """Command-line interface to chat with, feed, and inspect the bot."""

    def __init__(self, handler: MessageHandler, channel: Hashable = "general", user: Hashable = 1,
                 out: Optional[Console] = None):
        self.out = out or console
        self.handler = handler
        self.sink = ConsoleSink(self.out)
        self.handler.sink = self.sink
        self.channel = channel
        self.user = user
        self.running = True

    def run(self):
        """
        Main interactive loop:
        - Plain lines are sent to the bot as chat messages.
        - Lines starting with '/' are commands.
        """
        self.out.rule("[bold magenta]Markov Chatter[/bold magenta]")
        self.out.print("[cyan]Type messages as the current user. Replies appear in panels.[/cyan]")
        self.out.print("Commands: /channel /user /gen /usim /stats /chains /replay /quit\n")

        while self.running:
            try:
                line = Prompt.ask(f"[green]{self.user}[/green]@[blue]#{self.channel}[/blue]",
                                  default="", console=self.out)
            except (EOFError, KeyboardInterrupt):
                self._exit()
                break
            if not line:
                continue
            if line.startswith("/"):
                self.handle_command(line)
                continue
            self.send(line)

    def send(self, text: str):
        self.handler.on_message(ChatMessage(self.channel, self.user, text))

    # COMMAND HANDLING -----------------------------------------------------------
    def handle_command(self, cmd: str):
        name, _, arg = cmd.partition(" ")
        arg = arg.strip()

        if name == "/quit":
            self._exit()
        elif name == "/channel" and arg:
            self.channel = _as_id(arg)
        elif name == "/user" and arg:
            self.user = _as_id(arg)
        elif name == "/gen":
            self._generate_for(_as_id(arg) if arg else self.channel)
        elif name == "/usim" and arg:
            self._mimic(arg)
        elif name == "/stats":
            self._show_stats()
        elif name == "/chains":
            self._show_chains()
        elif name == "/replay" and arg:
            self.replay_file(arg)
        else:
            self.out.print(f"[red]Unknown command:[/red] {cmd}")

    def _generate_for(self, channel: Hashable):
        text = self.handler.channels.generate(channel)
        if text is None:
            self.out.print(f"[yellow]No chain for #{channel} yet.[/yellow]")
            return
        self.sink.send(channel, text)

    def _mimic(self, target: str):
        user = parse_mention(target)
        text = self.handler.members.generate(user) if user is not None else None
        if text is None:
            self.out.print(f"[yellow]Nothing learned from {target} yet.[/yellow]")
            return
        self.sink.send(self.channel, text)

    # REPLAY -------------------------------------------------------------------------
    def replay(self, messages: Iterable[ChatMessage], workers: int = 1) -> int:
        with log.time_block("replay"):
            if workers > 1:
                count = sum(self._replay_by_channel(messages, workers).values())
            else:
                count = self._feed(messages)
        self.out.print(f"[dim]Replayed {count} messages, {len(self.sink.sent)} replies so far.[/dim]")
        return count

    def _feed(self, messages: Iterable[ChatMessage]) -> int:
        count = 0
        for msg in messages:
            self.handler.on_message(msg)
            count += 1
        return count

    def _replay_by_channel(self, messages: Iterable[ChatMessage], workers: int) -> Dict[Hashable, int]:
        """
        One worker per channel. Messages keep their order within a channel;
        an author active in several channels sees them interleaved.
        """
        by_channel: Dict[Hashable, List[ChatMessage]] = defaultdict(list)
        for msg in messages:
            by_channel[msg.channel_id].append(msg)
        jobs = {channel: (lambda batch=batch: self._feed(batch)) for channel, batch in by_channel.items()}
        return run_keyed(jobs, max_workers=workers)

    def replay_file(self, path: str, workers: int = 1) -> Optional[int]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return self.replay(read_chat_log(f), workers=workers)
        except OSError as e:
            self.out.print(f"[red]Cannot read {path}:[/red] {e}")
            return None

    # DISPLAY -------------------------------------------------------------------------------
    def _show_chains(self):
        table = Table(title="Chains", box=box.SIMPLE, show_edge=False)
        table.add_column("Kind", style="cyan")
        table.add_column("Key", style="bold")
        table.add_column("Tokens", justify="right")
        table.add_column("Transitions", justify="right", style="magenta")
        table.add_column("History", justify="right", style="dim")

        for registry in (self.handler.channels, self.handler.members):
            for key in registry.keys():
                with registry.locked(key) as chain:
                    s = chain.stats()
                table.add_row(registry.name, str(key), str(s["tokens"]),
                              str(s["transitions"]), f"{s['history']}/{s['cache_size']}")
        self.out.print(table)

    def _show_stats(self):
        table = Table(title="Metrics", box=box.MINIMAL)
        table.add_column("Metric", style="cyan")
        table.add_column("Count", justify="right")
        table.add_column("Avg", justify="right", style="magenta")
        for key, row in self.handler.metrics.summary().items():
            table.add_row(key, str(row["count"]), f"{row['avg']:.6f}")
        self.out.print(table)

    def _exit(self):
        self.out.rule("[red]Exiting[/red]")
        self.running = False


# ENTRY POINT ------------------------------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="markov-chatter", description="Character-level markov chat bot.")
    p.add_argument("--config", help="JSON config file (created with defaults if missing)")
    p.add_argument("--order", type=int, help="lookbehind order of every chain")
    p.add_argument("--cache-size", type=int, help="messages remembered per chain")
    p.add_argument("--reply-chance", type=float, help="chance to reply after a learned message")
    p.add_argument("--seed", type=int, help="seed for reproducible sampling")
    p.add_argument("--channel", default="general", help="starting channel id")
    p.add_argument("--user", default="1", help="starting user id")
    p.add_argument("--replay", metavar="FILE", help="replay a tab-separated chat log and exit")
    p.add_argument("--workers", type=int, default=1, help="replay channels in parallel on this many threads")
    p.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")
    p.add_argument("--log-file", help="also append log lines to this file")
    p.add_argument("--no-color", action="store_true", help="plain log output")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    cfg = Config(args.config)
    try:
        for key, val in (("order", args.order), ("cache_size", args.cache_size),
                         ("reply_chance", args.reply_chance), ("log_level", args.log_level)):
            if val is not None:
                cfg.set(key, val, save=False)
        log.set_level(cfg["log_level"])
        handler = MessageHandler(cfg, rng=random.Random(args.seed))
    except ValueError as e:
        console.print(f"[red]Invalid settings:[/red] {e}")
        return 2
    log.use_color = not args.no_color
    log.path = args.log_file

    cli = CLI(handler, channel=_as_id(args.channel), user=_as_id(args.user))
    if args.replay:
        return 0 if cli.replay_file(args.replay, workers=args.workers) is not None else 1
    cli.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
