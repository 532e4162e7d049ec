"""Base model and enum for HT API payloads.

Every HT response model inherits from :class:`HtBaseModel` which
provides:

* ``alias_generator=to_camel`` so camelCase API keys map
  automatically to snake_case fields.
* A ``raw`` dict that captures the original payload.

String enums inherit from :class:`HtEnum` which resolves values without
a mapped member to ``UNKNOWN``.
"""

from __future__ import annotations

import enum
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic.alias_generators import to_camel

from pyhthome.exceptions import HtDecodeError

M = TypeVar("M", bound=BaseModel)


class HtEnum(str, enum.Enum):
    """Base for HT string enums.

    Every subclass **must** define ``UNKNOWN = "unknown"``.
    """

    @classmethod
    def _missing_(cls, value: object) -> HtEnum:
        unknown: HtEnum = cls.UNKNOWN  # type: ignore[attr-defined]
        return unknown


class HtBaseModel(BaseModel):
    """Base for HT API response models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
        coerce_numbers_to_str=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict, exclude=True)
    """Original API payload."""

    @model_validator(mode="before")
    @classmethod
    def _stash_raw(cls, values: Any) -> Any:
        if isinstance(values, dict) and "raw" not in values:
            return {**values, "raw": dict(values)}
        return values


def parse_model(model: type[M], payload: Any, *, endpoint: str) -> M:
    """Validate *payload* into *model*, mapping failures to :class:`HtDecodeError`."""
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise HtDecodeError(
            f"Unexpected {model.__name__} payload from {endpoint}: {exc.error_count()} validation error(s)",
            endpoint=endpoint,
        ) from exc
