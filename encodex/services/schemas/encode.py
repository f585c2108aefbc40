# services/schemas/encode.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from encodex.services.schemas.media import MediaInfoRead, VideoSizeSchema


class VideoAttributesSchema(BaseModel):
    codec: Optional[str] = Field(None, examples=["libx264", "copy"])
    tag: Optional[str] = None
    bit_rate: Optional[int] = Field(None, ge=1)
    frame_rate: Optional[int] = Field(None, ge=1)
    size: Optional[VideoSizeSchema] = None
    pix_format: Optional[str] = Field(None, examples=["yuv420p"])
    gop_size: Optional[str] = None
    keyint_min: Optional[str] = None
    sc_threshold: Optional[str] = None

    @field_validator("size")
    @classmethod
    def _size_known(cls, v: Optional[VideoSizeSchema]):
        if v is not None and (v.width < 1 or v.height < 1):
            raise ValueError("Output size must be at least 1x1")
        return v


class AudioAttributesSchema(BaseModel):
    codec: Optional[str] = Field(None, examples=["aac", "copy"])
    bit_rate: Optional[int] = Field(None, ge=1)
    channels: Optional[int] = Field(None, ge=1)
    sampling_rate: Optional[int] = Field(None, ge=1)
    volume: Optional[int] = None


class EncodeRequest(BaseModel):
    source: str = Field(..., examples=["/media/incoming/clip.wmv"])
    target: str = Field(..., examples=["/media/transcoded/clip.mp4"])
    format: str = Field(..., min_length=1, examples=["mp4"])
    offset: Optional[float] = Field(None, ge=0, description="Seconds to skip in the source")
    duration: Optional[float] = Field(None, gt=0, description="Seconds to encode")
    video: Optional[VideoAttributesSchema] = None
    audio: Optional[AudioAttributesSchema] = None
    qscale: Optional[str] = None
    strict: Optional[str] = Field(None, examples=["-2"])

    @model_validator(mode="after")
    def _needs_a_stream(self):
        if self.video is None and self.audio is None:
            raise ValueError("At least one of video or audio must be given")
        return self


class EncodeResponse(BaseModel):
    ok: bool
    started_at: datetime
    finished_at: datetime
    source: Optional[MediaInfoRead] = None
    messages: List[str] = Field(default_factory=list)
    progress_updates: int = 0
    last_permille: int = Field(0, ge=0, le=1000)


class FrameRequest(BaseModel):
    source: str
    target: str = Field(..., examples=["/media/thumbs/clip.jpg"])
    offset: float = Field(0, ge=0, description="Seconds into the source")
