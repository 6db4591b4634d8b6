"""Title block metadata captured from the document front matter."""

from __future__ import annotations

from collections.abc import Mapping
import datetime as _dt
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import TitleBlockError


__all__ = [
    "AuthorRecord",
    "DocumentDate",
    "TitleMetadata",
    "load_title_metadata",
]


_DATE_PATTERN = re.compile(r"^(?P<year>\d{4})(?:-(?P<month>\d{1,2})(?:-(?P<day>\d{1,2}))?)?$")


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    candidate = value if isinstance(value, str) else str(value)
    return candidate.strip()


class AuthorRecord(BaseModel):
    """Author entry rendered inside ``<front>``."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    initials: str = ""
    surname: str = ""
    fullname: str = Field(default="", alias="fullName")
    role: str = ""
    ascii: str = Field(default="", alias="asciiName")

    @field_validator("initials", "surname", "fullname", "role", "ascii", mode="before")
    @classmethod
    def _coerce_strings(cls, value: Any) -> str:
        return _coerce_text(value)


class DocumentDate(BaseModel):
    """Publication date whose components are independently optional."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    year: int | None = None
    month: int | None = Field(default=None, ge=1, le=12)
    day: int | None = Field(default=None, ge=1, le=31)

    @classmethod
    def parse(cls, value: Any) -> DocumentDate | None:
        """Coerce YAML date shapes into a :class:`DocumentDate`."""
        if value is None or value == "":
            return None
        if isinstance(value, DocumentDate):
            return value
        if isinstance(value, _dt.datetime):
            value = value.date()
        if isinstance(value, _dt.date):
            return cls(year=value.year, month=value.month, day=value.day)
        if isinstance(value, int):
            return cls(year=value)
        if isinstance(value, Mapping):
            return cls(**{key: value[key] for key in ("year", "month", "day") if key in value})
        match = _DATE_PATTERN.match(str(value).strip())
        if match is None:
            raise ValueError(f"Unsupported date value '{value}', expected YYYY[-MM[-DD]].")
        parts = {key: int(part) for key, part in match.groupdict().items() if part}
        return cls(**parts)


class TitleMetadata(BaseModel):
    """Document-level metadata rendered in the front matter."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    title: str = ""
    abbrev: str = Field(default="", alias="abbreviatedTitle")
    doc_name: str = Field(default="", alias="docName")
    category: str = ""
    ipr: str = ""
    area: str = ""
    workgroup: str = ""
    date: DocumentDate | None = None
    keywords: tuple[str, ...] = ()
    authors: tuple[AuthorRecord, ...] = ()

    @field_validator(
        "title", "abbrev", "doc_name", "category", "ipr", "area", "workgroup", mode="before"
    )
    @classmethod
    def _coerce_strings(cls, value: Any) -> str:
        return _coerce_text(value)

    @field_validator("date", mode="before")
    @classmethod
    def _coerce_date(cls, value: Any) -> DocumentDate | None:
        return DocumentDate.parse(value)

    @field_validator("keywords", mode="before")
    @classmethod
    def _coerce_keywords(cls, value: Any) -> tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            items = value.split(",")
        else:
            items = list(value)
        return tuple(text for text in (_coerce_text(item) for item in items) if text)

    @field_validator("authors", mode="before")
    @classmethod
    def _coerce_authors(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, Mapping):
            return (value,)
        return value


_KEY_ALIASES = {
    "abbreviated_title": "abbrev",
    "docname": "doc_name",
    "doc-name": "doc_name",
    "keyword": "keywords",
    "author": "authors",
}


def load_title_metadata(payload: Mapping[str, Any] | None) -> TitleMetadata:
    """Validate a front matter mapping into :class:`TitleMetadata`.

    Unknown keys are ignored; invalid values raise :class:`TitleBlockError`.
    """
    data: dict[str, Any] = {}
    for key, value in (payload or {}).items():
        name = _KEY_ALIASES.get(str(key).lower(), str(key))
        data[name] = value
    try:
        return TitleMetadata.model_validate(data)
    except ValidationError as exc:
        raise TitleBlockError(f"Invalid title block: {exc}") from exc
