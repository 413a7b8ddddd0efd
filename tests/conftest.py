import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))
# Evita que um SMTP_HOST do ambiente mande e-mail de verdade durante os testes.
os.environ.pop("SMTP_HOST", None)

from fastapi.testclient import TestClient

from core.config import Settings, get_settings
from core.db import SubmissionStore, get_store
from utils.mailer import MailDeliveryError, get_mailer


class FakeMailer:
    def __init__(self, error=None):
        self.error = error
        self.sent = []

    async def send(self, to, subject, body):
        if self.error:
            raise MailDeliveryError(self.error)
        self.sent.append({"to": to, "subject": subject, "body": body})


@pytest.fixture
def store(tmp_path):
    s = SubmissionStore(f"sqlite:///{tmp_path / 'data' / 'app.db'}")
    s.create_all()
    yield s
    s.engine.dispose()


@pytest.fixture
def settings(tmp_path):
    return Settings(
        ADMIN_USER="admin",
        ADMIN_PASS="s3cret:pass",
        SMTP_HOST=None,
        DATA_DIR=str(tmp_path / "data"),
        _env_file=None,
    )


@pytest.fixture
def mailer():
    return None


@pytest.fixture
def client(store, settings, mailer):
    from main import app

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_mailer] = lambda: mailer
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
