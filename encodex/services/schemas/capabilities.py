# services/schemas/capabilities.py
from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from encodex.domain.enums.capability import CapabilityKind


class CapabilityListRead(BaseModel):
    kind: CapabilityKind
    names: List[str] = Field(default_factory=list, examples=[["aac", "mp3", "opus"]])
