"""
Test configuration and fixtures for the Apocapalette token core.
"""
import pytest
from fastapi.testclient import TestClient

# Import the main app
from main import app
from apocapalette.utils.metrics import reset_metrics as reset_global_metrics


@pytest.fixture
def test_client():
    """Create test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def reset_metrics():
    """Reset metrics before each test."""
    reset_global_metrics()


@pytest.fixture
def sample_project_data():
    """Two-section project as persisted by the editor."""
    return {
        "schemaVersion": 1,
        "projectName": "Seasons",
        "settings": {"nearDupThreshold": 2.0, "neutralCap": 8, "maxColors": 40, "anchorsAlwaysKeep": True},
        "sections": [
            {
                "id": "spring",
                "label": "Spring",
                "kind": "season",
                "baseHex": "#ff0000",
                "mode": "Monochromatic",
                "tokens": {"primary": "#ff0000", "secondary": "#00ff00"},
                "colors": [
                    {"name": "Blue", "hex": "#0000ff"},
                    {"name": "Red copy", "hex": "#ff0000"},
                    {"name": "Near red", "hex": "#fe0000"},
                ],
            },
            {
                "id": "summer",
                "label": "Summer",
                "kind": "season",
                "baseHex": "#ffff00",
                "mode": "apocalypse",
                "colors": [{"name": "Yellow", "hex": "#ffff00"}],
            },
        ],
    }
