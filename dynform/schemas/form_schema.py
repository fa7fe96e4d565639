import re
from datetime import date, datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

TODAY = "today"


def parse_calendar_date(s: str) -> date | None:
    """
    Parse an ISO date or datetime string into a local calendar day.

    Aware datetimes are converted to local time first, so
    "2025-03-01T23:30:00-05:00" lands on whatever day that instant is here.
    Returns None when the string is not a valid ISO date.
    """
    try:
        dt = datetime.fromisoformat(s.strip())
    except ValueError:
        return None
    if dt.tzinfo is not None:
        try:
            dt = dt.astimezone()
        except OverflowError:
            # instant falls outside datetime range once shifted
            return None
    return dt.date()


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")


class TextRules(_Frozen):
    min_length: int | None = Field(default=None, ge=0, alias="minLength")
    max_length: int | None = Field(default=None, ge=0, alias="maxLength")
    # matched against the whole value
    pattern: str | None = None

    @field_validator("pattern")
    @classmethod
    def pattern_compiles(cls, v: str | None) -> str | None:
        if v is not None:
            try:
                re.compile(v)
            except re.error as e:
                raise ValueError(f"invalid pattern: {e}") from e
        return v


class TextareaRules(_Frozen):
    min_length: int | None = Field(default=None, ge=0, alias="minLength")
    max_length: int | None = Field(default=None, ge=0, alias="maxLength")


class NumberRules(_Frozen):
    min: int | float | None = None
    max: int | float | None = None


class MultiSelectRules(_Frozen):
    min_selected: int | None = Field(default=None, ge=0, alias="minSelected")
    max_selected: int | None = Field(default=None, ge=0, alias="maxSelected")


class DateRules(_Frozen):
    # "today" or an ISO date string
    min_date: str | None = Field(default=None, alias="minDate")

    @field_validator("min_date")
    @classmethod
    def min_date_parses(cls, v: str | None) -> str | None:
        if v is not None and v != TODAY and parse_calendar_date(v) is None:
            raise ValueError(f"minDate must be 'today' or an ISO date, got {v!r}")
        return v


class _FieldBase(_Frozen):
    name: str = Field(min_length=1)
    label: str = Field(min_length=1)
    required: bool = False


def _check_distinct(options: tuple[str, ...]) -> tuple[str, ...]:
    if len(set(options)) != len(options):
        raise ValueError("options must be distinct")
    return options


class TextField(_FieldBase):
    type: Literal["text"] = "text"
    validations: TextRules | None = None


class TextareaField(_FieldBase):
    type: Literal["textarea"] = "textarea"
    validations: TextareaRules | None = None


class NumberField(_FieldBase):
    type: Literal["number"] = "number"
    validations: NumberRules | None = None


class SelectField(_FieldBase):
    type: Literal["select"] = "select"
    options: tuple[str, ...] = Field(min_length=1)

    @field_validator("options")
    @classmethod
    def options_distinct(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return _check_distinct(v)


class MultiSelectField(_FieldBase):
    type: Literal["multi-select"] = "multi-select"
    options: tuple[str, ...] = Field(min_length=1)
    validations: MultiSelectRules | None = None

    @field_validator("options")
    @classmethod
    def options_distinct(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return _check_distinct(v)


class DateField(_FieldBase):
    type: Literal["date"] = "date"
    validations: DateRules | None = None


class SwitchField(_FieldBase):
    type: Literal["switch"] = "switch"


FormField = Annotated[
    Union[
        TextField,
        NumberField,
        SelectField,
        MultiSelectField,
        DateField,
        TextareaField,
        SwitchField,
    ],
    Field(discriminator="type"),
]


class FormSchema(_Frozen):
    """
    Declarative description of one form.

    Field order drives rendering and the iteration order of error maps; it
    has no effect on validation outcome.
    """

    title: str
    fields: tuple[FormField, ...]

    @model_validator(mode="after")
    def names_unique(self) -> "FormSchema":
        seen: set[str] = set()
        for f in self.fields:
            if f.name in seen:
                raise ValueError(f"duplicate field name: {f.name}")
            seen.add(f.name)
        return self

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def field(self, name: str) -> FormField | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def to_document(self) -> dict:
        """camelCase document served to remote renderers; unset keys omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
