"""Value store interface and implementations.

A value store is a key-value surface of named slots holding numbers or text.
The harvester does all of its I/O through this interface.
"""

from __future__ import annotations

import json
import logging
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

from equity_mc.errors import StoreUnavailableError

logger = logging.getLogger(__name__)

SlotValue = Union[float, int, str, None]


class ValueStore(ABC):
    """Abstract base class for named-slot value stores."""

    @abstractmethod
    def get_value(self, slot: str) -> SlotValue:
        """Read the current value of a slot."""
        pass

    @abstractmethod
    def set_value(self, slot: str, value: SlotValue) -> None:
        """Overwrite the value of a slot."""
        pass

    def flush(self) -> None:
        """Block until pending recomputation has resolved.

        Stores without deferred computation have nothing to do.
        """

    def sleep(self, milliseconds: float) -> None:
        """Best-effort pause."""
        time.sleep(milliseconds / 1000.0)


class InMemoryValueStore(ValueStore):
    """Dictionary-backed store."""

    def __init__(self, values: dict[str, SlotValue] | None = None) -> None:
        self._values: dict[str, SlotValue] = dict(values or {})

    def get_value(self, slot: str) -> SlotValue:
        try:
            return self._values[slot]
        except KeyError:
            raise StoreUnavailableError(f"Unknown slot: {slot}") from None

    def set_value(self, slot: str, value: SlotValue) -> None:
        self._values[slot] = value

    def snapshot(self) -> dict[str, SlotValue]:
        """Return a copy of all slots."""
        return dict(self._values)


class JsonFileValueStore(ValueStore):
    """Store whose slots live in a JSON object on disk.

    Every write rewrites the document through a temporary file that is then
    moved into place, so readers never observe a half-written file.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _load(self) -> dict[str, SlotValue]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (json.JSONDecodeError, OSError) as exc:
            raise StoreUnavailableError(f"Cannot read {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StoreUnavailableError(f"{self.path} does not hold a JSON object")
        return data

    def _dump(self, data: dict[str, SlotValue]) -> None:
        temp_path = self.path.with_suffix(".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with temp_path.open("w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2)
            temp_path.replace(self.path)
        except OSError as exc:
            raise StoreUnavailableError(f"Cannot write {self.path}: {exc}") from exc

    def get_value(self, slot: str) -> SlotValue:
        data = self._load()
        if slot not in data:
            raise StoreUnavailableError(f"Unknown slot: {slot}")
        return data[slot]

    def set_value(self, slot: str, value: SlotValue) -> None:
        data = self._load()
        data[slot] = value
        self._dump(data)
        logger.debug("Wrote %s=%r to %s", slot, value, self.path)

    def update(self, values: dict[str, SlotValue]) -> None:
        """Write several slots in one rewrite of the document."""
        data = self._load()
        data.update(values)
        self._dump(data)
