# tests/services/conftest.py
from __future__ import annotations
import pytest
from starlette.testclient import TestClient

from encodex.services.api.app import create_app
from encodex.services.api.deps import get_encoder
from encodex.services.encoder.encoder import Encoder


@pytest.fixture()
def api_encoder(fake_port):
    """Real Encoder driven by the canned FakeProcessPort."""
    return Encoder(fake_port)


@pytest.fixture()
def api_client(api_encoder):
    """
    A TestClient whose `get_encoder` dependency is overridden to hand out the
    fake-port-backed encoder, so no ffmpeg binary is needed.
    """
    app = create_app()
    app.dependency_overrides[get_encoder] = lambda: api_encoder
    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
