from pydantic import BaseModel, ConfigDict, Field


class ValidationResult(BaseModel):
    """Verdict of one validation run: field name -> message, passing fields absent"""
    model_config = ConfigDict(populate_by_name=True)

    is_valid: bool = Field(alias="isValid")
    errors: dict[str, str]
