"""Telemetry for rotation runs."""

from .run_store import RunStore, StepRecord

__all__ = ["RunStore", "StepRecord"]
