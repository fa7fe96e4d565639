from __future__ import annotations

import copy
import logging
import math
import re
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Literal, Protocol

from fastapi import Depends, Request
from sqlalchemy import func
from sqlalchemy.orm import Session

from dynform.core.config import settings
from dynform.db.session import get_db
from dynform.models.submission import Submission

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _lenient_int(raw: Any) -> int | None:
    """Leading-integer parse: "3" -> 3, "2abc" -> 2, "abc" -> None."""
    if raw is None:
        return None
    if isinstance(raw, int):
        return raw
    m = _LEADING_INT_RE.match(str(raw))
    return int(m.group(1)) if m else None


@dataclass(frozen=True)
class ListParams:
    page: int = 1
    limit: int = 10
    sort_order: Literal["asc", "desc"] = "desc"
    # only createdAt is sortable; kept so callers can echo what they asked for
    sort_by: str = "createdAt"

    @classmethod
    def from_query(
        cls,
        *,
        page: Any = None,
        limit: Any = None,
        sort_by: Any = None,
        sort_order: Any = None,
        default_limit: int = 10,
    ) -> "ListParams":
        """
        Normalize raw query values. Zero, negative or unparseable page/limit
        fall back to 1 / default_limit; anything but "asc" sorts descending.
        """
        return cls(
            page=max(_lenient_int(page) or 1, 1),
            limit=max(_lenient_int(limit) or default_limit, 1),
            sort_order="asc" if sort_order == "asc" else "desc",
            sort_by="createdAt",
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class SubmissionRecord:
    id: str
    created_at: datetime
    data: dict[str, Any]


@dataclass(frozen=True)
class ListResult:
    items: list[SubmissionRecord]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return 1 if self.total == 0 else math.ceil(self.total / self.limit)


class SubmissionStore(Protocol):
    def create(self, data: dict[str, Any]) -> SubmissionRecord: ...

    def list(self, params: ListParams) -> ListResult: ...

    def delete_by_id(self, submission_id: str) -> bool: ...


class InMemorySubmissionStore:
    """
    Process-local store. Mutations are serialized by a lock; listing works
    on a snapshot, so readers never see a half-applied write.
    """

    def __init__(self, clock: Clock = _utcnow):
        self._clock = clock
        self._lock = threading.Lock()
        self._items: list[SubmissionRecord] = []

    def create(self, data: dict[str, Any]) -> SubmissionRecord:
        record = SubmissionRecord(
            id=str(uuid.uuid4()),
            created_at=self._clock(),
            data=copy.deepcopy(data),
        )
        with self._lock:
            self._items.append(record)
        logger.info("Submission created id=%s", record.id)
        return record

    def list(self, params: ListParams) -> ListResult:
        with self._lock:
            snapshot = list(self._items)

        ordered = sorted(snapshot, key=lambda r: r.created_at, reverse=params.sort_order == "desc")
        page_items = ordered[params.offset : params.offset + params.limit]
        return ListResult(items=page_items, total=len(ordered), page=params.page, limit=params.limit)

    def delete_by_id(self, submission_id: str) -> bool:
        with self._lock:
            for i, r in enumerate(self._items):
                if r.id == submission_id:
                    del self._items[i]
                    break
            else:
                return False
        logger.info("Submission deleted id=%s", submission_id)
        return True


def _record(row: Submission) -> SubmissionRecord:
    created_at = row.created_at
    # SQLite hands back naive datetimes; everything is stored as UTC
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return SubmissionRecord(id=str(row.id), created_at=created_at, data=row.data)


class SqlSubmissionStore:
    def __init__(self, db: Session, clock: Clock = _utcnow):
        self.db = db
        self._clock = clock

    def create(self, data: dict[str, Any]) -> SubmissionRecord:
        row = Submission(data=data, created_at=self._clock())
        self.db.add(row)
        self.db.commit()
        logger.info("Submission created id=%s", row.id)
        return _record(row)

    def list(self, params: ListParams) -> ListResult:
        total = self.db.query(func.count(Submission.id)).scalar() or 0

        order = Submission.created_at.asc() if params.sort_order == "asc" else Submission.created_at.desc()
        rows = (
            self.db.query(Submission)
            .order_by(order)
            .offset(params.offset)
            .limit(params.limit)
            .all()
        )
        return ListResult(items=[_record(r) for r in rows], total=total, page=params.page, limit=params.limit)

    def delete_by_id(self, submission_id: str) -> bool:
        try:
            key = uuid.UUID(submission_id)
        except ValueError:
            return False

        row = self.db.get(Submission, key)
        if not row:
            return False

        self.db.delete(row)
        self.db.commit()
        logger.info("Submission deleted id=%s", submission_id)
        return True


def get_submission_store(request: Request, db: Session = Depends(get_db)) -> SubmissionStore:
    if settings.SUBMISSION_STORE == "memory":
        return request.app.state.submission_store
    return SqlSubmissionStore(db)
