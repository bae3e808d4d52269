"""Shared test fixtures for the LexForm test suite."""

from pathlib import Path

import numpy as np
import pytest
import yaml

AADHAAR_TEXT = (
    "GOVERNMENT OF INDIA\n"
    "Name: Ramesh Kumar\n"
    "DOB: 15/08/1985\n"
    "Address: 12 MG Road\n"
    "Bengaluru, Karnataka\n"
    "1234 5678 9012\n"
)


@pytest.fixture
def sample_image() -> np.ndarray:
    """A synthetic RGB page with a white text-like block."""
    image = np.zeros((200, 300, 3), dtype=np.uint8)
    image[50:150, 50:250] = (255, 255, 255)
    return image


@pytest.fixture
def aadhaar_text() -> str:
    return AADHAAR_TEXT


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def templates_file(tmp_path: Path) -> Path:
    """A small template library on disk."""
    templates = {
        "affidavit": {
            "description": "General affidavit",
            "category": "affidavit",
            "content": "I, {{name}}, residing at {{address}}, on {{date}}. {{name}}",
            "required_documents": ["Aadhaar card"],
        },
        "old_notice": {
            "description": "Retired notice",
            "category": "notice",
            "content": "Notice to {{name}}",
            "status": "inactive",
        },
    }
    path = tmp_path / "templates.yaml"
    with open(path, "w") as f:
        yaml.safe_dump(templates, f)
    return path
