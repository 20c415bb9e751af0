"""Non-fatal problems collected during a run."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from .logger import DoxadocLogger, get_logger


class DiagnosticKind(Enum):
    """Categories of tolerated input problems."""

    UNATTACHED_PAGE = "unattached-page"
    UNRESOLVED_INNER_CLASS = "unresolved-inner-class"
    UNRESOLVED_FIELD_TYPE = "unresolved-field-type"
    MALFORMED_PARAM = "malformed-param"
    UNHANDLED_CONTENT = "unhandled-content"


@dataclass(frozen=True)
class Diagnostic:
    """A single collected warning."""

    kind: DiagnosticKind
    message: str

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.message}"


class Diagnostics:
    """Ordered, de-duplicated collection of run warnings.

    Every new entry is also logged at WARNING level, so a silent run still
    reports what was dropped while tests can assert on the collection.
    """

    def __init__(self, logger: DoxadocLogger | None = None) -> None:
        self.logger = logger or get_logger()
        self._items: list[Diagnostic] = []
        self._seen: set[Diagnostic] = set()

    def add(self, kind: DiagnosticKind, message: str) -> None:
        """Record a warning unless an identical one was already recorded."""
        diagnostic = Diagnostic(kind, message)
        if diagnostic in self._seen:
            return
        self._seen.add(diagnostic)
        self._items.append(diagnostic)
        self.logger.warning(f"WARNING: {message}")

    def of_kind(self, kind: DiagnosticKind) -> list[Diagnostic]:
        """Return the collected warnings of one category."""
        return [d for d in self._items if d.kind == kind]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)
