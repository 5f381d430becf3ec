"""Shared data model primitives."""

from hn_digest.data_model.base import ApiRecordModel, StrictBaseModel


__all__ = ["ApiRecordModel", "StrictBaseModel"]
