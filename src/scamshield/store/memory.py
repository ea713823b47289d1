"""In-process report repository used for local development and tests.

Documents are kept in their raw stored shape and parsed through
:meth:`ScamReport.from_document` on every read, so the in-memory backend
exercises the same boundary parsing as Firestore. Query semantics follow
Firestore: documents missing a filtered or ordered field are excluded, and
range queries return results ordered by the ranged field.
"""

from __future__ import annotations

import copy
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from scamshield.errors import ReportNotFoundError
from scamshield.store.models import ScamReport
from scamshield.store.repository import PREFIX_SENTINEL, ReportQuery, ReportRepository

LOGGER = logging.getLogger(__name__)

_MISSING = object()


class InMemoryReportRepository(ReportRepository):
    """Dictionary-backed implementation of :class:`ReportRepository`."""

    def __init__(self, documents: Mapping[str, Mapping[str, Any]] | None = None) -> None:
        self._documents: Dict[str, Dict[str, Any]] = {}
        for report_id, data in (documents or {}).items():
            self._documents[str(report_id)] = dict(data)

    def __len__(self) -> int:
        return len(self._documents)

    async def find_equal(self, field_name: str, value: Any, *, limit: int) -> List[ScamReport]:
        matches = [
            (report_id, data)
            for report_id, data in self._documents.items()
            if data.get(field_name, _MISSING) == value
        ]
        return self._parse(matches[:limit])

    async def find_prefix(self, field_name: str, prefix: str, *, limit: int) -> List[ScamReport]:
        upper = prefix + PREFIX_SENTINEL
        matches = []
        for report_id, data in self._documents.items():
            value = data.get(field_name)
            if isinstance(value, str) and prefix <= value <= upper:
                matches.append((report_id, data))
        matches.sort(key=lambda item: (item[1][field_name], item[0]))
        return self._parse(matches[:limit])

    async def query(self, report_query: ReportQuery) -> List[ScamReport]:
        matches = [
            (report_id, data)
            for report_id, data in self._documents.items()
            if all(data.get(key, _MISSING) == expected for key, expected in report_query.filters.items())
        ]
        order_field = report_query.order_by
        if order_field:
            matches = [item for item in matches if item[1].get(order_field) is not None]
            matches.sort(
                key=lambda item: (_sort_key(item[1][order_field]), item[0]),
                reverse=report_query.descending,
            )
        if report_query.start_after:
            ids = [report_id for report_id, _ in matches]
            if report_query.start_after in ids:
                matches = matches[ids.index(report_query.start_after) + 1 :]
        return self._parse(matches[: report_query.limit])

    async def get(self, report_id: str) -> ScamReport | None:
        data = self._documents.get(report_id)
        if data is None:
            return None
        return ScamReport.from_document(report_id, copy.deepcopy(data))

    async def add(self, document: Mapping[str, Any]) -> ScamReport:
        report_id = uuid.uuid4().hex
        stored = dict(document)
        stored.setdefault("timestamp", datetime.now(timezone.utc))
        self._documents[report_id] = stored
        LOGGER.debug("Stored report %s in memory repository", report_id)
        return ScamReport.from_document(report_id, copy.deepcopy(stored))

    async def update(self, report_id: str, fields: Mapping[str, Any]) -> None:
        data = self._require(report_id)
        data.update(fields)

    async def increment_report_count(self, report_id: str, amount: int = 1) -> None:
        data = self._require(report_id)
        current = data.get("reportCount")
        base = current if isinstance(current, int) and not isinstance(current, bool) else 0
        data["reportCount"] = base + amount

    def _require(self, report_id: str) -> Dict[str, Any]:
        data = self._documents.get(report_id)
        if data is None:
            raise ReportNotFoundError(report_id)
        return data

    @staticmethod
    def _parse(items: Iterable[Tuple[str, Mapping[str, Any]]]) -> List[ScamReport]:
        return [ScamReport.from_document(report_id, copy.deepcopy(data)) for report_id, data in items]


def _sort_key(value: Any) -> Any:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    return value


__all__ = ["InMemoryReportRepository"]
