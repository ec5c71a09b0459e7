import pytest
from dotenv import load_dotenv

from jsonize.registry import CLASS_REGISTRY


@pytest.fixture(scope="session", autouse=True)
def load_environment_variables():
    """Load environment variables from .env file for the test session."""
    load_dotenv(".env.test", override=True)


@pytest.fixture
def restore_registry():
    """Snapshot the process-wide class registry and restore it after the test."""
    original_registry = CLASS_REGISTRY.copy()
    yield CLASS_REGISTRY
    # dict.clear/update bypass the registration checks
    CLASS_REGISTRY.clear()
    CLASS_REGISTRY.update(original_registry)
