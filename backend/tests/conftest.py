"""Shared test fixtures and configuration for backend tests."""
from pathlib import Path
from typing import Callable, List, Optional

import pytest
from fastapi.testclient import TestClient

import convertiq.config as config_module
from convertiq.config import (
    AppConfig,
    CleanupSettings,
    ConversionSettings,
    StagingSettings,
    UploadSettings,
)
from convertiq.main import app


@pytest.fixture
def staging_dir(tmp_path) -> Path:
    """Isolated staging directory for one test."""
    return tmp_path / "staging"


@pytest.fixture
def make_client(staging_dir, monkeypatch) -> Callable[..., TestClient]:
    """Start the app against an isolated staging directory.

    Keyword arguments override StagingSettings (e.g. retention_seconds);
    ``max_upload_bytes`` lowers the upload size limit.
    Converter delays are zeroed so tests don't wait on the stubs.

    The client is entered as a context manager so the lifespan runs and
    retention timers live on one event loop across requests.
    """
    clients: List[TestClient] = []

    def _make(max_upload_bytes: Optional[int] = None, **staging_overrides) -> TestClient:
        uploads = UploadSettings() if max_upload_bytes is None else UploadSettings(max_upload_bytes=max_upload_bytes)
        config = AppConfig(
            staging=StagingSettings(directory=str(staging_dir), **staging_overrides),
            conversion=ConversionSettings(
                document_delay_seconds=0,
                image_delay_seconds=0,
                media_delay_seconds=0,
            ),
            uploads=uploads,
            cleanup=CleanupSettings(orphan_sweep_enabled=False),
        )
        monkeypatch.setattr(config_module, "_config", config)
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def api_client(make_client) -> TestClient:
    """Provide a started TestClient with the default one-hour retention."""
    return make_client()
