"""Response contracts for structured generation.

Each contract declares the JSON shape requested from Gemini and the pydantic
type the answer is validated against locally.
"""

from pydantic import TypeAdapter
from google.genai import types

from sous_chef.clients.structured import ResponseContract
from sous_chef.models.models import DishSuggestion, Recipe


_STRING = types.Schema(type=types.Type.STRING)

_DISH_SUGGESTION_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "id": _STRING,
        "title": _STRING,
        "description": _STRING,
        "difficulty": types.Schema(type=types.Type.STRING, enum=["Easy", "Medium", "Hard"]),
        "prepTime": _STRING,
        "matchScore": types.Schema(type=types.Type.NUMBER, minimum=1, maximum=100),
    },
    required=["id", "title", "description", "difficulty", "prepTime", "matchScore"],
)

DISH_SUGGESTIONS = ResponseContract(
    name="dish suggestions",
    schema=types.Schema(type=types.Type.ARRAY, items=_DISH_SUGGESTION_SCHEMA),
    adapter=TypeAdapter(list[DishSuggestion]),
)

RECIPE = ResponseContract(
    name="recipe",
    schema=types.Schema(
        type=types.Type.OBJECT,
        properties={
            "title": _STRING,
            "ingredients": types.Schema(type=types.Type.ARRAY, items=_STRING),
            "instructions": types.Schema(type=types.Type.ARRAY, items=_STRING),
            "tips": types.Schema(type=types.Type.ARRAY, items=_STRING),
            "nutritionalInfo": _STRING,
        },
        required=["title", "ingredients", "instructions", "tips", "nutritionalInfo"],
    ),
    adapter=TypeAdapter(Recipe),
)
