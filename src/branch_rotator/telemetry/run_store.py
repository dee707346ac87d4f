"""In‑memory record of the steps executed during one rotation."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass
class StepRecord:
    """Record representing a single external command."""

    name: str
    argv: list[str]
    cwd: str
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    duration_ms: int = 0
    started_at: float = 0.0
    finished_at: float = 0.0

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class RunStore:
    """Simple in‑memory store for step records.  Not persisted between runs."""

    def __init__(self) -> None:
        self._steps: list[StepRecord] = []

    def add(self, record: StepRecord) -> None:
        self._steps.append(record)

    def get(self, name: str) -> StepRecord | None:
        for record in self._steps:
            if record.name == name:
                return record
        return None

    def __iter__(self) -> Iterator[StepRecord]:
        return iter(self._steps)

    def __len__(self) -> int:
        return len(self._steps)
