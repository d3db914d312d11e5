from .cli import CLI, ConsoleSink, main, read_chat_log

__all__ = ["CLI", "ConsoleSink", "main", "read_chat_log"]
