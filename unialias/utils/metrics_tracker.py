# metrics_tracker.py - running averages for timings (match latency, reloads)

import json
import os
from collections import defaultdict

from unialias.utils.logger_utils import Log


class Metrics:
    """Sum/count per key. With a path, totals survive restarts in a small JSON file."""

    def __init__(self, path=None):
        self.path = path
        self.m = defaultdict(float)
        self.n = defaultdict(int)
        self._load()

    def _load(self):
        if not self.path or not os.path.exists(self.path):
            return
        try:
            with open(self.path, "r", encoding="utf8") as f:
                d = json.load(f)
            for k, v in d.items():
                self.m[k] = float(v["sum"])
                self.n[k] = int(v["count"])
        except (OSError, ValueError, TypeError, KeyError, AttributeError) as e:
            Log.warning(f"[Metrics] could not read {self.path}, starting fresh: {e}")
            self.m.clear()
            self.n.clear()

    def save(self):
        if not self.path:
            return
        folder = os.path.dirname(self.path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        d = {k: {"sum": self.m[k], "count": self.n[k]} for k in self.m}
        with open(self.path, "w", encoding="utf8") as f:
            json.dump(d, f, indent=2)

    def record(self, key, val):
        self.m[key] += val
        self.n[key] += 1
        self.save()

    def avg(self, key):
        if self.n[key] == 0:
            return 0.0
        return self.m[key] / self.n[key]

    def rows(self):
        return [(k, self.n[k], self.avg(k)) for k in sorted(self.m)]

    def show(self):
        lines = ["metrics:"]
        for k, count, avg in self.rows():
            lines.append(f"  {k:15} {avg:.4f} ({count})")
        return "\n".join(lines)
