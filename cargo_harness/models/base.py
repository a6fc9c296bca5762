"""Shared pydantic base for every decoded cargo record."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationInfo, model_validator


def is_strict(info: ValidationInfo) -> bool:
    return bool(info.context and info.context.get("strict"))


class CargoModel(BaseModel):
    """Immutable record decoded from cargo's JSON output.

    Unknown fields are ignored by default. Validating with
    ``context={"strict": True}`` rejects them instead, for callers that want
    to notice schema drift in newer cargo releases.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _reject_unknown_fields(cls, data: Any, info: ValidationInfo) -> Any:
        if not is_strict(info) or not isinstance(data, dict):
            return data
        known = set(cls.model_fields)
        known.update(f.alias for f in cls.model_fields.values() if f.alias)
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"unknown field(s) for {cls.__name__}: {unknown}")
        return data

    def to_json(self) -> str:
        """Encode as one line of cargo-style JSON."""
        return self.model_dump_json(by_alias=True)
