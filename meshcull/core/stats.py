"""Operation statistics data structures and presentation utilities.

Every TriMesh keeps one OpStats per removal operation name so callers can see
how often an operation ran, how often it was a no-op and how much it removed.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Any


@dataclass
class OpStats:
    attempts: int = 0
    noops: int = 0
    removed: int = 0
    # Faces dropped because one of their vertices was removed
    cascaded: int = 0
    # Timing (seconds)
    time_total: float = 0.0
    time_max: float = 0.0
    time_min: float = 0.0  # 0 means uninitialized

    def record_time(self, duration: float) -> None:
        self.time_total += duration
        if duration > self.time_max:
            self.time_max = duration
        if self.time_min == 0.0 or duration < self.time_min:
            self.time_min = duration

    def reset(self) -> None:
        self.attempts = 0
        self.noops = 0
        self.removed = 0
        self.cascaded = 0
        self.time_total = 0.0
        self.time_max = 0.0
        self.time_min = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'attempts': self.attempts,
            'noops': self.noops,
            'removed': self.removed,
            'cascaded': self.cascaded,
            'noop_rate': (self.noops / self.attempts) if self.attempts else 0.0,
            'time_total': self.time_total,
            'time_max': self.time_max,
            'time_min': self.time_min,
            'time_avg': (self.time_total / self.attempts) if self.attempts else 0.0,
        }


def format_stats_table(stats_dict) -> str:
    """Return a human readable multi-line table summarizing op stats."""
    if not stats_dict:
        return "<no stats>"
    header = ["op", "attempts", "noops", "removed", "cascaded", "avg_ms", "min_ms", "max_ms"]
    rows = []
    for op in sorted(stats_dict.keys()):
        s = stats_dict[op]
        rows.append([
            op, str(s['attempts']), str(s['noops']), str(s['removed']), str(s['cascaded']),
            f"{s['time_avg'] * 1000.0:8.3f}", f"{s['time_min'] * 1000.0:8.3f}", f"{s['time_max'] * 1000.0:8.3f}"
        ])
    col_w = [len(h) for h in header]
    for r in rows:
        for i, v in enumerate(r):
            if len(v) > col_w[i]: col_w[i] = len(v)
    def fmt(r):
        return " ".join(r[i].rjust(col_w[i]) for i in range(len(r)))
    lines = [fmt(header), "-" * (sum(col_w) + len(col_w) - 1)] + [fmt(r) for r in rows]
    return "\n".join(lines)


def print_stats(stats_dict, file=None, pretty=True):  # pragma: no cover - formatting wrapper
    import sys
    out = file or sys.stdout
    if not pretty:
        print(stats_dict, file=out)
        return
    print(format_stats_table(stats_dict), file=out)


__all__ = ["OpStats", "print_stats", "format_stats_table"]
