"""Report repository interface shared by the Firestore and in-memory backends.

The analysis engine only needs two read shapes from the store:

- equality lookup: ``find_equal("contactInfo", value, limit=N)``
- prefix-range lookup: ``find_prefix("content", prefix, limit=N)``, i.e.
  ``field >= prefix AND field <= prefix + PREFIX_SENTINEL``

The report management service additionally reads single documents, browses
with filters/ordering/cursors, and applies the small set of mutations the
application performs (submission, confirmation, moderation).
"""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from scamshield.store.models import ScamReport

# Sorts after any printable character, so ``prefix + PREFIX_SENTINEL`` bounds
# every string that starts with ``prefix``.
PREFIX_SENTINEL = "\uf8ff"


@dataclass(slots=True)
class ReportQuery:
    """Browse query over the report collection."""

    filters: Dict[str, Any] = field(default_factory=dict)
    order_by: str | None = None
    descending: bool = False
    limit: int = 10
    start_after: str | None = None


class ReportRepository(abc.ABC):
    """Async access to the ``reports`` collection."""

    @abc.abstractmethod
    async def find_equal(self, field_name: str, value: Any, *, limit: int) -> List[ScamReport]:
        """Return up to ``limit`` reports whose ``field_name`` equals ``value``."""

    @abc.abstractmethod
    async def find_prefix(self, field_name: str, prefix: str, *, limit: int) -> List[ScamReport]:
        """Return up to ``limit`` reports whose ``field_name`` starts with ``prefix``."""

    @abc.abstractmethod
    async def query(self, report_query: ReportQuery) -> List[ScamReport]:
        """Return reports matching equality filters, ordered and paginated."""

    @abc.abstractmethod
    async def get(self, report_id: str) -> ScamReport | None:
        """Return a single report or ``None`` when it does not exist."""

    @abc.abstractmethod
    async def add(self, document: Mapping[str, Any]) -> ScamReport:
        """Store a new report document and return the parsed record."""

    @abc.abstractmethod
    async def update(self, report_id: str, fields: Mapping[str, Any]) -> None:
        """Overwrite the given fields on an existing report."""

    @abc.abstractmethod
    async def increment_report_count(self, report_id: str, amount: int = 1) -> None:
        """Atomically add ``amount`` to the stored ``reportCount``."""


__all__ = ["PREFIX_SENTINEL", "ReportQuery", "ReportRepository"]
