"""Generation logging data models."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class GenerationLog(BaseModel):
    """Single log entry for one question generation request."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    org_id: str | None = None
    timestamp: datetime = Field(default_factory=datetime.now)
    scope: str  # "all" | category name
    job_title: str | None = None
    model: str | None = None
    added_count: int = 0
    elapsed_seconds: float = 0.0
    total_input_tokens: int = 0
    total_output_tokens: int = 0
    estimated_cost_usd: float = 0.0
    success: bool = True
    error_message: str | None = None
