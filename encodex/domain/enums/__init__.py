from encodex.domain.enums.stream_kind import StreamKind
from encodex.domain.enums.capability import CapabilityKind

__all__ = [
    "StreamKind",
    "CapabilityKind",
]
