# config_manager.py - JSON config manager

import json
import os
from typing import Any, Dict, Optional

from .logger_utils import log

DEFAULTS: Dict[str, Any] = {
    "order": 5,              # lookbehind of every chain
    "cache_size": 1000,      # messages remembered per chain
    "max_steps": 4096,       # cap on unseen-token fillers in one walk
    "reply_chance": 0.005,   # odds of speaking up after a learned message
    "trigger_phrase": "hi markov",
    "mimic_prefix": "usim ",
    "log_level": "INFO",
}


class Config:
    """
    Bot settings, merged from a JSON file over DEFAULTS.
    With path=None nothing touches the disk.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = path
        self.data: Dict[str, Any] = dict(DEFAULTS)
        self._load()

    def _load(self):
        if not self.path:
            return
        if not os.path.exists(self.path):
            self.save()
            return
        try:
            with open(self.path, "r", encoding="utf8") as f:
                loaded = json.load(f)
        except (OSError, ValueError) as e:
            log.warning(f"[config] could not read {self.path}, using defaults: {e}")
            return
        if not isinstance(loaded, dict):
            log.warning(f"[config] {self.path} is not a JSON object, using defaults")
            return
        for key, val in loaded.items():
            if key not in DEFAULTS:
                log.warning(f"[config] ignoring unknown option '{key}'")
                continue
            try:
                self.set(key, val, save=False)
            except ValueError as e:
                log.warning(f"[config] bad value for '{key}': {e}")

    def save(self):
        if not self.path:
            return
        folder = os.path.dirname(self.path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        with open(self.path, "w", encoding="utf8") as f:
            json.dump(self.data, f, indent=2)

    def __getitem__(self, key: str) -> Any:
        return self.data[key]

    def set(self, key: str, val: Any, save: bool = True):
        """Set an option, coercing it to the type of its default."""
        if key not in DEFAULTS:
            raise KeyError(f"no such option: {key}")
        kind = type(DEFAULTS[key])
        try:
            coerced = kind(val)
        except (TypeError, ValueError) as e:
            raise ValueError(f"{key} expects {kind.__name__}, got {val!r}") from e
        # 2.9 -> 2 would silently change the setting
        if isinstance(val, float) and coerced != val:
            raise ValueError(f"{key} expects {kind.__name__}, got {val!r}")
        self.data[key] = coerced
        if save:
            self.save()

    def markov_config(self):
        """MarkovConfig for new chains built from these settings."""
        from ..core.markov_chain import MarkovConfig
        return MarkovConfig(
            order=self.data["order"],
            cache_size=self.data["cache_size"],
            max_steps=self.data["max_steps"],
        )
