from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SubmissionOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    created_at: datetime = Field(alias="createdAt")
    data: dict[str, Any]


class SubmissionCreated(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    id: str
    created_at: datetime = Field(alias="createdAt")
