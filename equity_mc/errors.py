"""Exception types raised by the harvester."""

from __future__ import annotations


class EquityMCError(Exception):
    """Base class for all harvester errors."""


class InvalidSampleCountError(EquityMCError, ValueError):
    """The requested sample count is missing, non-numeric or not positive."""


class StoreUnavailableError(EquityMCError, RuntimeError):
    """A read, write or flush against the value store failed."""


class NonConvergenceError(EquityMCError, RuntimeError):
    """A watched value never settled inside its bounds."""

    def __init__(
        self, polls: int, value: object, lower: object, upper: object
    ) -> None:
        super().__init__(
            f"Value {value!r} did not settle inside [{lower!r}, {upper!r}] "
            f"after {polls} polls"
        )
        self.polls = polls
        self.value = value
        self.lower = lower
        self.upper = upper
