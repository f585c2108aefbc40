# encodex/services/api/deps.py
from __future__ import annotations

from encodex.services.encoder.encoder import Encoder


def get_encoder() -> Encoder:
    """
    Provide the Encoder via DI. Swappable in tests with
    app.dependency_overrides[get_encoder].
    """
    return Encoder()
