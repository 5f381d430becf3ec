"""Shared Pydantic base models."""

from pydantic import BaseModel, ConfigDict


class StrictBaseModel(BaseModel):
    """Base model with strict, immutable defaults."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class ApiRecordModel(BaseModel):
    """Immutable model for third-party API records.

    Unknown fields are ignored so upstream schema additions never break parsing.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")
