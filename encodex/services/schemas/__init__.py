from encodex.services.schemas.media import (
    MediaInfoRead,
    VideoStreamRead,
    AudioStreamRead,
    VideoSizeSchema,
    ProbeRequest,
)
from encodex.services.schemas.encode import (
    EncodeRequest,
    EncodeResponse,
    FrameRequest,
    VideoAttributesSchema,
    AudioAttributesSchema,
)
from encodex.services.schemas.capabilities import (
    CapabilityListRead
)
__all__ = [
    "MediaInfoRead",
    "VideoStreamRead",
    "AudioStreamRead",
    "VideoSizeSchema",
    "ProbeRequest",
    "EncodeRequest",
    "EncodeResponse",
    "FrameRequest",
    "VideoAttributesSchema",
    "AudioAttributesSchema",
    "CapabilityListRead",
]
