"""Pytest configuration and fixtures for integration tests.

Loads .env from the project root and skips the whole directory when
GEMINI_API_KEY is not configured. These tests call the real Gemini API.
"""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv


def pytest_configure(config):
    """Load .env before test collection."""
    env_path = Path(__file__).parent.parent.parent / ".env"
    load_dotenv(env_path)

    print("\n" + "=" * 70)
    print("Note: Integration tests require a valid GEMINI_API_KEY")
    print(f"Environment loaded from: {env_path}")
    print("=" * 70 + "\n")


def pytest_collection_modifyitems(config, items):
    """Mark everything in this directory as integration and skip it without a key."""
    skip = None
    if not os.getenv("GEMINI_API_KEY"):
        skip = pytest.mark.skip(reason="GEMINI_API_KEY not set. Please set it in your .env file.")
    here = Path(__file__).parent
    for item in items:
        if here not in Path(str(item.fspath)).parents:
            continue
        item.add_marker(pytest.mark.integration)
        if skip is not None:
            item.add_marker(skip)
