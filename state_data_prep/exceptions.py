"""Exception types raised by the data prep stages.

Only structural problems are raised.  Cell-level problems (values that do
not parse as numbers) and row-level problems (join keys without a partner)
degrade the data instead and are reported through logging.
"""

from __future__ import annotations

from typing import Iterable


class PrepError(Exception):
    """Base class for fatal data prep errors."""


class SchemaMismatch(PrepError, KeyError):
    """A required column is absent after header normalization."""

    def __init__(self, stage: str, missing: Iterable[str]) -> None:
        self.stage = stage
        self.missing = sorted(missing)
        super().__init__(
            f"{stage}: missing required column(s): {', '.join(self.missing)}"
        )

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class RetrievalFailure(PrepError, RuntimeError):
    """The remote census service was unreachable or returned bad data."""
