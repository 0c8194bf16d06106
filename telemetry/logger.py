from __future__ import annotations

import json
import time
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, Optional


def _now_iso() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%S", time.localtime())


@dataclass
class TelemetryLogger:
    """
    Append-only JSONL event log for battles.

    One row per event (phase changes, moves, attacks, defeats, sampled tick
    snapshots). Does nothing until ``init`` gives it a file.
    """
    path: Optional[Path] = None
    enabled: bool = True
    flush_each_write: bool = False
    sample_every_n_ticks: int = 30  # one tick snapshot every N ticks
    battle_id: int = 0
    counts: Counter = field(default_factory=Counter)
    _tick_counter: int = 0
    _started_at: float = field(default_factory=time.time)

    def init(self, path: Path) -> None:
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.touch(exist_ok=True)
        self.log("telemetry_init", file=str(self.path))

    def begin_battle(self, **fields: Any) -> int:
        """Start a new battle section; later rows carry its id."""
        self.battle_id += 1
        self.counts.clear()
        self._tick_counter = 0
        self._started_at = time.time()
        self.log("battle_start", **fields)
        return self.battle_id

    def log(self, event: str, **fields: Any) -> None:
        if not self.enabled or self.path is None:
            return

        self.counts[event] += 1
        row: Dict[str, Any] = {
            "ts": _now_iso(),
            "elapsed": round(time.time() - self._started_at, 3),
            "battle": self.battle_id,
            "event": event,
            **fields,
        }

        try:
            with self.path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(row, ensure_ascii=False, default=str) + "\n")
                if self.flush_each_write:
                    f.flush()
        except OSError:
            # A full disk or missing directory must not stop the battle.
            return

    def tick(self) -> int:
        self._tick_counter += 1
        return self._tick_counter

    def should_log_tick(self) -> bool:
        return self.sample_every_n_ticks > 0 and (self._tick_counter % self.sample_every_n_ticks == 0)

    def summary(self) -> Dict[str, int]:
        """Event counts for the current battle."""
        return dict(self.counts)


def read_events(path: Path, event: Optional[str] = None) -> Iterator[Dict[str, Any]]:
    """Yield rows from a telemetry file, optionally only one event type. Bad lines are skipped."""
    with path.open("r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                row = json.loads(line)
            except ValueError:
                continue
            if event is None or row.get("event") == event:
                yield row


# Global singleton
telemetry = TelemetryLogger()
