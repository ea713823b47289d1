"""Firestore-backed report repository."""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, List, Mapping, Optional

from google.api_core import exceptions as google_exceptions
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from scamshield.errors import ReportNotFoundError, RepositoryError
from scamshield.store.models import ScamReport
from scamshield.store.repository import PREFIX_SENTINEL, ReportQuery, ReportRepository

LOGGER = logging.getLogger(__name__)


class FirestoreReportRepository(ReportRepository):
    """Read and mutate the ``reports`` collection through the async Firestore client.

    Every failure reaching the store is logged and re-raised as
    :class:`RepositoryError`; callers decide whether to absorb it.
    """

    def __init__(
        self,
        *,
        project: str | None,
        collection: str,
        client: Optional[firestore.AsyncClient] = None,
    ) -> None:
        if not collection:
            raise ValueError("FirestoreReportRepository requires a collection name")
        if client is None and not project:
            raise ValueError("FirestoreReportRepository requires a project ID")

        self._client = client or firestore.AsyncClient(project=project)
        self._collection = self._client.collection(collection)
        self._collection_name = collection

    async def find_equal(self, field_name: str, value: Any, *, limit: int) -> List[ScamReport]:
        query = self._collection.where(filter=FieldFilter(field_name, "==", value)).limit(limit)
        return await self._run(query, f"{field_name} == {value!r}")

    async def find_prefix(self, field_name: str, prefix: str, *, limit: int) -> List[ScamReport]:
        query = (
            self._collection.where(filter=FieldFilter(field_name, ">=", prefix))
            .where(filter=FieldFilter(field_name, "<=", prefix + PREFIX_SENTINEL))
            .limit(limit)
        )
        return await self._run(query, f"{field_name} startswith {prefix!r}")

    async def query(self, report_query: ReportQuery) -> List[ScamReport]:
        query: Any = self._collection
        for key, value in report_query.filters.items():
            query = query.where(filter=FieldFilter(key, "==", value))
        if report_query.order_by:
            direction = firestore.Query.DESCENDING if report_query.descending else firestore.Query.ASCENDING
            query = query.order_by(report_query.order_by, direction=direction)
        if report_query.start_after:
            cursor = await self._snapshot(report_query.start_after)
            if cursor is not None and cursor.exists:
                query = query.start_after(cursor)
        query = query.limit(report_query.limit)
        return await self._run(query, f"browse filters={report_query.filters}")

    async def get(self, report_id: str) -> ScamReport | None:
        snapshot = await self._snapshot(report_id)
        if snapshot is None or not snapshot.exists:
            return None
        return ScamReport.from_document(snapshot.id, snapshot.to_dict())

    async def add(self, document: Mapping[str, Any]) -> ScamReport:
        payload = dict(document)
        payload["timestamp"] = firestore.SERVER_TIMESTAMP
        try:
            _, doc_ref = await self._collection.add(payload)
        except Exception as exc:
            LOGGER.exception("Firestore add failed for collection=%s", self._collection_name)
            raise RepositoryError(f"Failed to store report: {exc}") from exc
        # The server timestamp is not echoed back; the parser stamps "now".
        stored = {key: value for key, value in payload.items() if key != "timestamp"}
        return ScamReport.from_document(doc_ref.id, stored)

    async def update(self, report_id: str, fields: Mapping[str, Any]) -> None:
        await self._update(report_id, dict(fields))

    async def increment_report_count(self, report_id: str, amount: int = 1) -> None:
        await self._update(report_id, {"reportCount": firestore.Increment(amount)})

    async def _update(self, report_id: str, fields: dict) -> None:
        try:
            await self._collection.document(report_id).update(fields)
        except google_exceptions.NotFound as exc:
            raise ReportNotFoundError(report_id) from exc
        except Exception as exc:
            LOGGER.exception("Firestore update failed for report_id=%s", report_id)
            raise RepositoryError(f"Failed to update report {report_id}: {exc}") from exc

    async def _snapshot(self, report_id: str) -> Any:
        try:
            return await self._collection.document(report_id).get()
        except Exception as exc:
            LOGGER.exception("Firestore read failed for report_id=%s", report_id)
            raise RepositoryError(f"Failed to read report {report_id}: {exc}") from exc

    async def _run(self, query: Any, description: str) -> List[ScamReport]:
        try:
            return [report async for report in _parse_stream(query.stream())]
        except Exception as exc:
            LOGGER.exception("Firestore query failed (%s)", description)
            raise RepositoryError(f"Firestore query failed ({description}): {exc}") from exc


async def _parse_stream(stream: AsyncIterator[Any]) -> AsyncIterator[ScamReport]:
    async for snapshot in stream:
        yield ScamReport.from_document(snapshot.id, snapshot.to_dict())


__all__ = ["FirestoreReportRepository"]
