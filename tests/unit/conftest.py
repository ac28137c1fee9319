"""Shared fixtures for unit tests.

Unit tests never reach the network: Gemini clients are MagicMock objects and
chat backends are in-memory fakes.
"""

import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest


SUGGESTIONS_PAYLOAD = [
    {
        "id": "dish-1",
        "title": "Spinach Omelette",
        "description": "Fluffy eggs folded around wilted spinach.",
        "difficulty": "Easy",
        "prepTime": "15 mins",
        "matchScore": 92,
    },
    {
        "id": "dish-2",
        "title": "Savory Crepes",
        "description": "Thin crepes with a cheesy filling.",
        "difficulty": "Medium",
        "prepTime": "30 mins",
        "matchScore": 78.5,
    },
]

RECIPE_PAYLOAD = {
    "title": "Spinach Omelette",
    "ingredients": ["3 eggs", "1 tbsp flour", "1 cup spinach"],
    "instructions": ["Whisk eggs with flour", "Wilt spinach", "Cook and fold"],
    "tips": ["Keep the heat medium-low"],
    "nutritionalInfo": "Approx. 320 kcal, 21g protein",
}


@pytest.fixture
def suggestions_json() -> str:
    return json.dumps(SUGGESTIONS_PAYLOAD)


@pytest.fixture
def recipe_json() -> str:
    return json.dumps(RECIPE_PAYLOAD)


@pytest.fixture
def genai_client():
    """MagicMock standing in for google.genai.Client."""
    client = MagicMock()
    client.models.generate_content.return_value = SimpleNamespace(text="[]")
    return client


@pytest.fixture
def suggestions_payload() -> list[dict]:
    return [dict(item) for item in SUGGESTIONS_PAYLOAD]


@pytest.fixture
def recipe_payload() -> dict:
    return {key: list(value) if isinstance(value, list) else value for key, value in RECIPE_PAYLOAD.items()}
