# services/schemas/media.py
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class VideoSizeSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    width: int = Field(..., ge=0, description="0 when ffmpeg does not know it", examples=[1280])
    height: int = Field(..., ge=0, examples=[720])


class VideoStreamRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    decoder: str = Field(..., examples=["h264 (High) (avc1 / 0x31637661)"])
    size: Optional[VideoSizeSchema] = None
    frame_rate: Optional[float] = Field(None, examples=[29.97])
    bit_rate: Optional[int] = Field(None, description="kb/s")


class AudioStreamRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    decoder: str = Field(..., examples=["aac"])
    sampling_rate: Optional[int] = Field(None, description="Hz", examples=[44100])
    channels: Optional[int] = Field(None, examples=[2])
    bit_rate: Optional[int] = Field(None, description="kb/s", examples=[128])


class MediaInfoRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    format: str = Field(..., examples=["mov,mp4,m4a,3gp,3g2,mj2"])
    duration_ms: int = Field(0, ge=0, examples=[90500])
    video: Optional[VideoStreamRead] = None
    audio: Optional[AudioStreamRead] = None


class ProbeRequest(BaseModel):
    path: str = Field(..., description="Absolute path of the file to probe",
                      examples=["/media/incoming/clip.mp4"])
