"""Recipe expansion: selected dish -> full recipe + optional photo.

The recipe and the photo are requested concurrently and joined independently:
- recipe failure is fatal and propagates unchanged;
- photo failure, or a response without an image, only leaves image=None.
"""

import asyncio
from typing import Iterable, Optional

from sous_chef.clients.image import ImageGenerationClient
from sous_chef.clients.structured import StructuredGenerationClient
from sous_chef.models.models import ExpandedRecipe, Recipe
from sous_chef.prompts.prompts import build_recipe_prompt
from sous_chef.prompts.schemas import RECIPE
from sous_chef.utils.errors import safe_execute_async
from sous_chef.utils.logger import logger


class RecipeExpansionOrchestrator:
    """Fans out recipe and image generation for one dish."""

    def __init__(
        self,
        client: StructuredGenerationClient,
        image_client: Optional[ImageGenerationClient] = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            client: Structured generator used for the recipe.
            image_client: Image generator. None disables the photo branch.
        """
        self.client = client
        self.image_client = image_client

    async def _generate_recipe(self, dish_title: str, ingredients: list[str]) -> Recipe:
        return await self.client.generate(build_recipe_prompt(dish_title, ingredients), RECIPE)

    async def _generate_image(self, dish_title: str) -> Optional[str]:
        if self.image_client is None:
            return None
        return await safe_execute_async(
            self.image_client.generate(dish_title),
            f"Image generation for '{dish_title}'",
            log_level="warning",
            default_return=None,
        )

    async def expand(self, dish_title: str, ingredients: Iterable[str]) -> ExpandedRecipe:
        """Build the full recipe for a dish, with a photo when one can be produced.

        Args:
            dish_title: Title of the selected dish.
            ingredients: Pantry ingredients the recipe should be built around.

        Returns:
            ExpandedRecipe with the validated recipe and an optional data-URI image.

        Raises:
            ValueError: If dish_title is blank.
            TransportError: Recipe backend call failed.
            SchemaValidationError: Recipe response failed validation.
        """
        title = dish_title.strip()
        if not title:
            raise ValueError("A dish title is required to expand a recipe")
        ingredient_list = list(ingredients)

        logger.info(f"Expanding recipe for '{title}'", extra={"operation": "expansion"})
        # The image branch never raises, so gather only propagates recipe failures
        recipe, image = await asyncio.gather(
            self._generate_recipe(title, ingredient_list),
            self._generate_image(title),
        )
        logger.info(
            f"✓ Recipe ready for '{title}' (image: {'yes' if image else 'no'})",
            extra={"operation": "expansion"},
        )
        return ExpandedRecipe(recipe=recipe, image=image)
