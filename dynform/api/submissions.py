import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Response, status
from fastapi.responses import JSONResponse

from dynform.core.config import settings
from dynform.core.form_definition import get_form_schema
from dynform.core.form_validation import validate_submission
from dynform.core.submission_store import (
    ListParams,
    SubmissionRecord,
    SubmissionStore,
    get_submission_store,
)
from dynform.schemas.form_schema import FormSchema
from dynform.schemas.pagination import PaginatedResponse, PaginationMeta
from dynform.schemas.submission import SubmissionCreated, SubmissionOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/submissions", tags=["submissions"])


def _submission_out(r: SubmissionRecord) -> SubmissionOut:
    return SubmissionOut(id=r.id, created_at=r.created_at, data=r.data)


@router.post(
    "",
    response_model=SubmissionCreated,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Field name -> validation message"}},
)
def create_submission(
    payload: Any = Body(default=None),
    schema: FormSchema = Depends(get_form_schema),
    store: SubmissionStore = Depends(get_submission_store),
):
    record = payload if isinstance(payload, dict) else {}

    verdict = validate_submission(schema, record)
    if not verdict.is_valid:
        logger.info("Submission rejected, invalid fields: %s", ", ".join(verdict.errors))
        # body is the bare errors map, not wrapped in "detail"
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=verdict.errors)

    created = store.create(record)
    return SubmissionCreated(id=created.id, created_at=created.created_at)


@router.get("", response_model=PaginatedResponse[SubmissionOut])
def list_submissions(
    page: str | None = None,
    limit: str | None = None,
    sortBy: str | None = None,
    sortOrder: str | None = None,
    store: SubmissionStore = Depends(get_submission_store),
):
    # raw strings on purpose: bad values fall back to defaults instead of a 422
    params = ListParams.from_query(
        page=page,
        limit=limit,
        sort_by=sortBy,
        sort_order=sortOrder,
        default_limit=settings.DEFAULT_PAGE_SIZE,
    )
    result = store.list(params)

    return PaginatedResponse[SubmissionOut](
        data=[_submission_out(r) for r in result.items],
        meta=PaginationMeta(total=result.total, page=result.page, total_pages=result.total_pages),
    )


@router.delete("/{submission_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_submission(
    submission_id: str,
    store: SubmissionStore = Depends(get_submission_store),
):
    if not store.delete_by_id(submission_id):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"id": "Submission not found"})
    return Response(status_code=status.HTTP_204_NO_CONTENT)
