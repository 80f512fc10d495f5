# Copyright (c) Syntropy Systems
"""Shared Pydantic model helpers for holdout."""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, JsonValue
from typing_extensions import TypeAlias

JSONObject: TypeAlias = dict[str, JsonValue]


class HoldoutBaseModel(BaseModel):
    """Base model with shared config for holdout schemas."""

    model_config: ClassVar[ConfigDict] = ConfigDict(
        extra="ignore",
        populate_by_name=True,
    )
