"""Root pytest configuration and fixtures.

This module provides:
- Environment setup (loads .env)
- A shared default catalog
- Sample UI descriptions used across module tests
"""

from __future__ import annotations

import copy
from typing import Any

import pytest
from dotenv import load_dotenv

from src.catalog import ComponentCatalog, build_default_catalog

# Load environment variables from .env file
load_dotenv()


# =============================================================================
# Catalog Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def default_catalog() -> ComponentCatalog:
    """Session-wide default catalog. Catalogs are read-only, so sharing is safe."""
    return build_default_catalog()


@pytest.fixture
def catalog(default_catalog: ComponentCatalog) -> ComponentCatalog:
    """Default catalog for a single test."""
    return default_catalog


# =============================================================================
# Sample Documents
# =============================================================================

_LOGIN_FORM: dict[str, Any] = {
    "version": "1.0",
    "root": {
        "id": "login-card",
        "type": "Card",
        "props": {"className": "w-96"},
        "children": [
            {
                "id": "title",
                "type": "CardTitle",
                "props": {},
                "children": ["Sign in"],
            },
            {
                "id": "content",
                "type": "CardContent",
                "props": {},
                "children": [
                    {
                        "id": "email-label",
                        "type": "Label",
                        "props": {"htmlFor": "email"},
                        "children": ["Email"],
                    },
                    {
                        "id": "email",
                        "type": "Input",
                        "props": {"type": "email", "placeholder": "you@example.com"},
                    },
                    {
                        "id": "remember",
                        "type": "Checkbox",
                        "props": {"checked": False},
                    },
                    {
                        "id": "volume",
                        "type": "Slider",
                        "props": {"value": [50], "min": 0, "max": 100, "step": 1},
                    },
                ],
            },
            {
                "id": "footer",
                "type": "CardFooter",
                "props": {},
                "children": [
                    {
                        "id": "submit",
                        "type": "Button",
                        "props": {"variant": "default", "size": "lg"},
                        "children": ["Sign in"],
                    },
                    {
                        "id": "help",
                        "type": "Link",
                        "props": {"href": "/help"},
                        "children": ["Need help?"],
                    },
                ],
            },
        ],
    },
}


@pytest.fixture
def valid_document() -> dict[str, Any]:
    """A well-formed login form description.

    Returns:
        A fresh deep copy, safe to mutate within a test.
    """
    return copy.deepcopy(_LOGIN_FORM)


@pytest.fixture
def minimal_document() -> dict[str, Any]:
    """Smallest valid description: a single empty container."""
    return {"version": "1.0", "root": {"id": "root", "type": "Container", "props": {}}}
