# metrics_tracker.py - running sums/counts for timings and events

import threading
from collections import defaultdict
from typing import Dict


class Metrics:
    def __init__(self):
        self.m = defaultdict(float)
        self.n = defaultdict(int)
        self._lock = threading.Lock()

    def record(self, key, val=1.0):
        with self._lock:
            self.m[key] += val
            self.n[key] += 1

    def avg(self, key):
        if self.n.get(key, 0) == 0: return 0.0
        return self.m[key] / self.n[key]

    def count(self, key) -> int:
        return self.n.get(key, 0)

    def summary(self) -> Dict[str, Dict[str, float]]:
        with self._lock:
            keys = sorted(self.m)
        return {k: {"count": self.n[k], "avg": self.avg(k)} for k in keys}
