"""Shared fixtures: app with explicit config and a fake AI vendor."""

import pytest

from app import create_app
from config import AppConfig, ExtractionConfig, RuntimeConfig

FENCED_REPLY = (
    '```json\n'
    '[{"index":1,"question":"$1+1=?$","options":["1","2","3","4"],"answer":"b"}]\n'
    '```'
)


class FakeVendorClient:
    """Stands in for a vendor client; records each request it receives."""

    name = "fake"

    def __init__(self, reply=FENCED_REPLY, error=None, wants_text=False, accepts_images=True):
        self.reply = reply
        self.accepts_images = accepts_images
        self.error = error
        self.wants_text = wants_text
        self.requests = []
        self.files_seen = []

    def needs_document_text(self, request):
        return self.wants_text

    def extract(self, request):
        self.requests.append(request)
        self.files_seen.append(
            [request.document.path] + [p.path for p in request.page_images]
        )
        for path in self.files_seen[-1]:
            assert path.exists(), f"{path} missing during vendor call"
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def app_config(upload_dir):
    return AppConfig(
        runtime=RuntimeConfig(
            ai_vendor="deepseek",
            deepseek_api_key="test-key",
            upload_tmp_dir=upload_dir,
            max_upload_mb=1,
        ),
        extraction=ExtractionConfig(payload_mode="file"),
    )


@pytest.fixture
def app(app_config):
    app = create_app(app_config)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def fake_vendor(monkeypatch):
    fake = FakeVendorClient()
    monkeypatch.setattr(
        "app.services.upload_service.get_vendor_client", lambda runtime: fake
    )
    return fake
