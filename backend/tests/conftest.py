import os
import tempfile

import pytest

# Must be set before app.utils.logger is imported
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="paper_assistant_logs_"))

from fastapi.testclient import TestClient  # noqa: E402

from app.api.deps import get_gateway  # noqa: E402
from app.main import app  # noqa: E402
from tests.mocks import MockGateway  # noqa: E402


@pytest.fixture
def gateway():
    return MockGateway()


@pytest.fixture
def client(gateway):
    app.dependency_overrides[get_gateway] = lambda: gateway
    yield TestClient(app)
    app.dependency_overrides.clear()
