"""Data models and schemas for the Sous Chef generation core.

Defines Pydantic models for the records exchanged with the generation backend
and with the presentation layer. Backend-facing models are strict: a record
that is missing a field, carries the wrong JSON type, or uses an unknown enum
literal is rejected instead of being coerced.
"""

from enum import Enum
from typing import Iterable, Iterator, List, Literal, Optional, Annotated

from pydantic import BaseModel, ConfigDict, Field


Difficulty = Literal["Easy", "Medium", "Hard"]
Role = Literal["user", "assistant"]


class CourseType(str, Enum):
    """Course the suggested dishes should belong to."""

    SNACK = "Snack"
    STARTER = "Starter"
    MAIN_COURSE = "Main Course"
    DESSERT = "Dessert"

    @classmethod
    def parse(cls, value: str) -> "CourseType":
        """Parse a course from its value, member name or the `main` alias (case-insensitive).

        Raises:
            ValueError: If value matches no course.
        """
        key = value.strip().lower().replace("-", " ").replace("_", " ")
        if key == "main":
            return cls.MAIN_COURSE
        for course in cls:
            if key in (course.value.lower(), course.name.lower().replace("_", " ")):
                return course
        choices = ", ".join(course.value for course in cls)
        raise ValueError(f"Unknown course '{value}'. Expected one of: {choices}")


class DishSuggestion(BaseModel):
    """A dish proposed for the current ingredients and course.

    Wire format uses camelCase (`prepTime`, `matchScore`); Python code uses the
    snake_case field names.
    """

    model_config = ConfigDict(strict=True, populate_by_name=True, str_strip_whitespace=True)

    id: Annotated[str, Field(min_length=1, description="Identifier assigned by the generator")]
    title: Annotated[str, Field(min_length=1, max_length=200, description="Dish name (1-200 chars)")]
    description: Annotated[str, Field(description="Short appetising description")]
    difficulty: Annotated[Difficulty, Field(description="One of Easy, Medium, Hard")]
    prep_time: Annotated[str, Field(alias="prepTime", description="Free-text preparation time, e.g. '25 mins'")]
    match_score: Annotated[
        float,
        Field(alias="matchScore", ge=1, le=100, description="How well the dish fits the ingredients (1-100)"),
    ]


class Recipe(BaseModel):
    """Full recipe for a selected dish.

    Ingredients, instructions and tips are ordered and must each hold at least
    one entry; an empty list from the backend is treated as an invalid response.
    """

    model_config = ConfigDict(strict=True, populate_by_name=True, str_strip_whitespace=True)

    title: Annotated[str, Field(min_length=1, max_length=200, description="Recipe title (1-200 chars)")]
    ingredients: Annotated[
        List[str], Field(min_length=1, description="Ingredients with specific measurements, in order")
    ]
    instructions: Annotated[List[str], Field(min_length=1, description="Step-by-step instructions, in order")]
    tips: Annotated[List[str], Field(min_length=1, description="Chef's tips")]
    nutritional_info: Annotated[
        str, Field(alias="nutritionalInfo", description="Basic nutritional information as text")
    ]


class ExpandedRecipe(BaseModel):
    """Recipe plus optional illustrative image for one selected dish."""

    recipe: Recipe
    image: Annotated[
        Optional[str],
        Field(None, description="data:image/png;base64,... URI, or None when no image was produced"),
    ]


class ChatMessage(BaseModel):
    """One entry of a conversation transcript."""

    role: Role
    text: str = ""


class IngredientSet:
    """Unique, explicitly mutated collection of pantry ingredients.

    Entries are whitespace-trimmed; blank entries and duplicates are ignored.
    Insertion order is kept so prompts built from the set are stable.
    """

    def __init__(self, ingredients: Iterable[str] = ()) -> None:
        self._items: dict[str, None] = {}
        for ingredient in ingredients:
            self.add(ingredient)

    def add(self, ingredient: str) -> bool:
        """Add an ingredient. Returns True if the set changed."""
        name = ingredient.strip()
        if not name or name in self._items:
            return False
        self._items[name] = None
        return True

    def remove(self, ingredient: str) -> bool:
        """Remove an ingredient. Returns True if the set changed."""
        name = ingredient.strip()
        if name not in self._items:
            return False
        del self._items[name]
        return True

    def as_list(self) -> list[str]:
        return list(self._items)

    def __contains__(self, ingredient: object) -> bool:
        return isinstance(ingredient, str) and ingredient.strip() in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, IngredientSet):
            return set(self._items) == set(other._items)
        if isinstance(other, (set, frozenset)):
            return set(self._items) == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"IngredientSet({self.as_list()!r})"
