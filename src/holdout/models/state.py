# Copyright (c) Syntropy Systems
"""Pydantic model for persisted classifier state."""

from __future__ import annotations

from pydantic import Field

from .base import HoldoutBaseModel, JSONObject


class TrainedState(HoldoutBaseModel):
    """Trained classifier state stored in <store_dir>/<identifier>.json."""

    identifier: str
    method: str
    saved_at: str
    n_features: int
    labels: list[str] = Field(default_factory=list)
    params: JSONObject = Field(default_factory=dict)
