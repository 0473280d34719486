"""Run configuration for the Equity Monte Carlo Harvester.

Contains the typed slot bindings and the run settings, with basic validation.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from numbers import Real
from pathlib import Path
from typing import Any

DEFAULT_PROGRESS_TEMPLATE = "Updating...Sim {i}"

# Summary fields, each bound to the SlotBindings attribute of the same name
OUTPUT_FIELDS: tuple[str, ...] = (
    "expected_value",
    "median",
    "min_value",
    "max_value",
    "standard_deviation",
    "q1",
    "q3",
)


@dataclass(frozen=True)
class SlotBindings:
    """Maps each logical field to the name of its slot in the value store."""

    sample_count: str = "simCount"
    sample: str = "fourHundredTradesEquity"
    expected_value: str = "expectedValue"
    median: str = "medianValue"
    min_value: str = "minValue"
    max_value: str = "maxValue"
    standard_deviation: str = "standardDeviation"
    q1: str = "q1Value"
    q3: str = "q3Value"

    def __post_init__(self) -> None:
        """Validate slot names."""
        names = [getattr(self, f.name) for f in fields(self)]
        for f, name in zip(fields(self), names):
            if not isinstance(name, str) or not name.strip():
                raise ValueError(f"Slot for {f.name} must be a non-empty string")
        if len(set(names)) != len(names):
            raise ValueError("Slot names must be unique")

    def output_slots(self) -> dict[str, str]:
        """Return summary field name -> slot name, never including the sample slot."""
        return {
            name: getattr(self, name)
            for name in OUTPUT_FIELDS
            if getattr(self, name) != self.sample
        }

    def progress_slots(self) -> list[str]:
        """Slots that receive progress markers while sampling."""
        return list(self.output_slots().values())


@dataclass(frozen=True)
class RunConfig:
    """Settings for one orchestrated run."""

    bindings: SlotBindings = field(default_factory=SlotBindings)
    max_polls: int | None = 1000
    poll_interval_ms: float = 50.0
    progress_template: str = DEFAULT_PROGRESS_TEMPLATE

    def __post_init__(self) -> None:
        """Validate run settings."""
        if self.max_polls is not None:
            if isinstance(self.max_polls, bool) or not isinstance(self.max_polls, int):
                raise ValueError(f"max_polls must be an integer or None, got {self.max_polls!r}")
            if self.max_polls < 1:
                raise ValueError("max_polls must be at least 1 or None")
        if isinstance(self.poll_interval_ms, bool) or not isinstance(self.poll_interval_ms, Real):
            raise ValueError(
                f"poll_interval_ms must be a number, got {self.poll_interval_ms!r}"
            )
        if self.poll_interval_ms < 0:
            raise ValueError("poll_interval_ms must be non-negative")
        if not isinstance(self.progress_template, str):
            raise ValueError("progress_template must be a string")
        try:
            self.progress_template.format(i=1)
        except (KeyError, IndexError, ValueError):
            raise ValueError("progress_template must format with only {i}") from None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RunConfig:
        """Build a config from a plain mapping, e.g. a parsed JSON document.

        Args:
            data: Mapping with optional keys ``bindings``, ``max_polls``,
                ``poll_interval_ms`` and ``progress_template``

        Returns:
            Validated RunConfig
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")

        kwargs = dict(data)
        bindings = kwargs.pop("bindings", None)
        if bindings is not None:
            try:
                kwargs["bindings"] = SlotBindings(**bindings)
            except TypeError as exc:
                raise ValueError(f"Invalid bindings: {exc}") from exc
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "bindings": {f.name: getattr(self.bindings, f.name) for f in fields(self.bindings)},
            "max_polls": self.max_polls,
            "poll_interval_ms": self.poll_interval_ms,
            "progress_template": self.progress_template,
        }


def load_config(path: str | Path) -> RunConfig:
    """Load a RunConfig from a JSON file."""
    with Path(path).open("r", encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a JSON object")
    return RunConfig.from_dict(data)
