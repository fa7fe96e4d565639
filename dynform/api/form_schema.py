from typing import Any

from fastapi import APIRouter, Body, Depends

from dynform.core.form_definition import get_form_schema
from dynform.core.form_validation import validate_submission
from dynform.schemas.form_schema import FormSchema
from dynform.schemas.validation import ValidationResult

router = APIRouter(prefix="/api/form-schema", tags=["form-schema"])


@router.get("")
def read_form_schema(schema: FormSchema = Depends(get_form_schema)):
    return {"success": True, "schema": schema.to_document()}


@router.post("/validate", response_model=ValidationResult)
def preview_validation(
    payload: Any = Body(default=None),
    schema: FormSchema = Depends(get_form_schema),
):
    """Dry run of the submission rules; nothing is stored."""
    return validate_submission(schema, payload)
