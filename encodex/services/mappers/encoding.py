# encodex/services/mappers/encoding.py
from __future__ import annotations

from typing import Optional

from encodex.domain.dataclasses.reports import EncodeReport
from encodex.domain.entities.encoding import AudioAttributes, EncodingAttributes, VideoAttributes
from encodex.domain.entities.media_info import MediaInfo, VideoSize
from encodex.services.schemas.encode import (
    AudioAttributesSchema,
    EncodeRequest,
    EncodeResponse,
    VideoAttributesSchema,
)
from encodex.services.schemas.media import MediaInfoRead


def to_media_info_read(info: Optional[MediaInfo]) -> Optional[MediaInfoRead]:
    if info is None:
        return None
    return MediaInfoRead.model_validate(info)


def _to_video(v: Optional[VideoAttributesSchema]) -> Optional[VideoAttributes]:
    if v is None:
        return None
    data = v.model_dump(exclude={"size"})
    size = VideoSize(width=v.size.width, height=v.size.height) if v.size else None
    return VideoAttributes(size=size, **data)


def _to_audio(a: Optional[AudioAttributesSchema]) -> Optional[AudioAttributes]:
    if a is None:
        return None
    return AudioAttributes(**a.model_dump())


def to_domain_attributes(req: EncodeRequest) -> EncodingAttributes:
    return EncodingAttributes(
        format=req.format,
        offset=req.offset,
        duration=req.duration,
        video=_to_video(req.video),
        audio=_to_audio(req.audio),
        qscale=req.qscale,
        strict=req.strict,
    )


def to_encode_response(report: EncodeReport, *, ok: bool = True) -> EncodeResponse:
    return EncodeResponse(
        ok=ok,
        started_at=report.started_at,
        finished_at=report.finished_at,
        source=to_media_info_read(report.source),
        messages=list(report.messages),
        progress_updates=report.progress_updates,
        last_permille=report.last_permille,
    )
