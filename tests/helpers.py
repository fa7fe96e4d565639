from datetime import date, datetime, timedelta, timezone
from itertools import count

from dynform.schemas.form_schema import FormSchema


def make_schema(*fields: dict, title: str = "Test Form") -> FormSchema:
    """
    fields example:
      {"name": "age", "label": "Age", "type": "number", "required": True,
       "validations": {"min": 18, "max": 65}}
    """
    return FormSchema.model_validate({"title": title, "fields": list(fields)})


def valid_onboarding_record(today: date | None = None, **overrides) -> dict:
    today = today or date.today()
    record = {
        "fullName": "Ada Lovelace",
        "age": 36,
        "department": "Engineering",
        "skills": ["Python", "React"],
        "dateOfJoining": today.isoformat(),
        "bio": "Writes the first programs.",
        "termsAccepted": True,
    }
    record.update(overrides)
    return record


def ticking_clock(start: datetime | None = None, step: timedelta = timedelta(seconds=1)):
    """Clock that advances by `step` on every call, for deterministic createdAt ordering."""
    start = start or datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)
    ticks = count()
    return lambda: start + step * next(ticks)
