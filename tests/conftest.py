import pytest
from fastapi.testclient import TestClient

from content_api.main import create_app

pytest_plugins = [
    "tests.fixtures.settings_fixtures",
    "tests.fixtures.aws_fixtures",
    "tests.fixtures.translator_fixtures",
]


@pytest.fixture
def client(settings, translator) -> TestClient:
    app = create_app(settings=settings, translator=translator)
    with TestClient(app) as test_client:
        yield test_client
