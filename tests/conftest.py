import sys
from pathlib import Path

import pytest

# Allow importing the service modules from the project root
PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(PROJECT_ROOT))

import project_config  # noqa: E402
from data_provider import SyntheticDataProvider  # noqa: E402
from query_processing import QueryClassifier  # noqa: E402


@pytest.fixture
def classifier():
    return QueryClassifier()


@pytest.fixture
def synthetic_provider():
    return SyntheticDataProvider()


@pytest.fixture
def client(monkeypatch):
    """Flask test client wired to the synthetic data provider"""
    monkeypatch.setattr(project_config, "DATA_PROVIDER", "synthetic")

    import app as app_module
    app_module.app.config["TESTING"] = True
    with app_module.app.test_client() as test_client:
        yield test_client
