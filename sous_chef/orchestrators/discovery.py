"""Dish discovery: pantry ingredients + course -> dish suggestions."""

from typing import Iterable

from sous_chef.clients.structured import StructuredGenerationClient
from sous_chef.models.models import CourseType, DishSuggestion
from sous_chef.prompts.prompts import build_suggestion_prompt
from sous_chef.prompts.schemas import DISH_SUGGESTIONS
from sous_chef.utils.logger import logger


class DishDiscoveryOrchestrator:
    """Asks the structured generator for dishes that fit the ingredients."""

    def __init__(self, client: StructuredGenerationClient, suggestion_count: int = 4) -> None:
        self.client = client
        self.suggestion_count = suggestion_count

    async def discover(self, ingredients: Iterable[str], course: CourseType) -> list[DishSuggestion]:
        """Suggest dishes for the ingredients and course.

        The list is returned in the order the model produced it. Its length is
        advisory and may differ from suggestion_count.

        Args:
            ingredients: At least one pantry ingredient.
            course: Course the dishes belong to.

        Returns:
            list[DishSuggestion]: Validated suggestions.

        Raises:
            ValueError: If no ingredients are given.
            TransportError: Backend unreachable or refused the call.
            SchemaValidationError: Backend answer failed validation.
        """
        ingredient_list = list(ingredients)
        if not ingredient_list:
            raise ValueError("At least one ingredient is required to discover dishes")

        logger.info(
            f"Discovering {course.value} dishes for {len(ingredient_list)} ingredient(s)",
            extra={"operation": "discovery"},
        )
        prompt = build_suggestion_prompt(ingredient_list, course, self.suggestion_count)
        suggestions = await self.client.generate(prompt, DISH_SUGGESTIONS)
        logger.info(f"✓ {len(suggestions)} dish suggestion(s) received", extra={"operation": "discovery"})
        return suggestions
