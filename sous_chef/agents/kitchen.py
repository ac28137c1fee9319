"""Kitchen assistant factory and application state.

KitchenAssistant is the framework-independent state a presentation layer
drives: the pantry, the selected course, the current suggestions, the
currently opened recipe and the lazily created chat session.
initialize_kitchen_assistant() validates configuration and wires every
component to one shared Gemini client.
"""

from typing import Optional, Union

from google import genai

from sous_chef.chat.session import ConversationSession
from sous_chef.clients.chat import ChatBackend, GeminiChatBackend
from sous_chef.clients.image import ImageGenerationClient
from sous_chef.clients.structured import StructuredGenerationClient
from sous_chef.models.models import CourseType, DishSuggestion, ExpandedRecipe, IngredientSet
from sous_chef.orchestrators.discovery import DishDiscoveryOrchestrator
from sous_chef.orchestrators.expansion import RecipeExpansionOrchestrator
from sous_chef.utils.config import Config, config as default_config
from sous_chef.utils.logger import logger


class KitchenAssistant:
    """Pantry, suggestions, selected recipe and chat for one user session."""

    def __init__(
        self,
        discovery: DishDiscoveryOrchestrator,
        expansion: RecipeExpansionOrchestrator,
        chat_backend: ChatBackend,
    ) -> None:
        self.discovery = discovery
        self.expansion = expansion
        self._chat_backend = chat_backend
        self._chat: Optional[ConversationSession] = None
        self._discovery_token = 0
        self._selection_token = 0

        self.ingredients = IngredientSet()
        self.course = CourseType.MAIN_COURSE
        self.suggestions: list[DishSuggestion] = []
        self.selected_title: Optional[str] = None
        self.selection: Optional[ExpandedRecipe] = None

    def add_ingredient(self, ingredient: str) -> bool:
        return self.ingredients.add(ingredient)

    def remove_ingredient(self, ingredient: str) -> bool:
        return self.ingredients.remove(ingredient)

    async def find_dishes(self) -> list[DishSuggestion]:
        """Replace the suggestions with a fresh discovery for the pantry and course.

        Does nothing while the pantry is empty. On failure the suggestion list
        stays empty and the error propagates. When discoveries overlap, only
        the most recent one is kept.
        """
        if not self.ingredients:
            logger.debug("No ingredients yet, skipping dish discovery")
            return self.suggestions

        self._discovery_token += 1
        token = self._discovery_token
        self.suggestions = []
        suggestions = await self.discovery.discover(self.ingredients.as_list(), self.course)
        if token == self._discovery_token:
            self.suggestions = suggestions
        else:
            logger.debug(f"Discarding stale {len(suggestions)} suggestion(s) for {self.course.value}")
        return suggestions

    async def select_dish(self, dish: Union[DishSuggestion, str]) -> ExpandedRecipe:
        """Open the full recipe for a dish, replacing any previous selection.

        When selections overlap, only the most recent one is kept.
        """
        title = dish.title if isinstance(dish, DishSuggestion) else dish
        self._selection_token += 1
        token = self._selection_token
        self.selected_title = title
        self.selection = None

        expanded = await self.expansion.expand(title, self.ingredients.as_list())
        if token == self._selection_token:
            self.selection = expanded
        else:
            logger.debug(f"Discarding stale recipe for '{title}'")
        return expanded

    def dismiss_recipe(self) -> None:
        self._selection_token += 1
        self.selected_title = None
        self.selection = None

    @property
    def chat(self) -> ConversationSession:
        """Chat session, created on first use and kept for the assistant's lifetime."""
        if self._chat is None:
            self._chat = ConversationSession(self._chat_backend)
        return self._chat


def initialize_kitchen_assistant(
    settings: Optional[Config] = None,
    client: Optional[genai.Client] = None,
) -> KitchenAssistant:
    """Factory function that validates configuration and wires the assistant.

    Args:
        settings: Configuration to use. Defaults to the module-level config.
        client: Pre-built genai.Client (optional, mainly for tests).

    Returns:
        KitchenAssistant: Ready-to-use assistant.

    Raises:
        ValueError: If configuration is invalid.
    """
    settings = settings or default_config
    logger.info("Step 1/3: Validating configuration...")
    settings.validate()
    logger.info("✓ Configuration valid")

    logger.info("Step 2/3: Creating Gemini clients...")
    client = client or genai.Client(api_key=settings.GEMINI_API_KEY)
    structured = StructuredGenerationClient(
        api_key=settings.GEMINI_API_KEY,
        model=settings.GEMINI_MODEL,
        temperature=settings.TEMPERATURE,
        client=client,
    )
    image_client = None
    if settings.GENERATE_IMAGES:
        image_client = ImageGenerationClient(
            api_key=settings.GEMINI_API_KEY,
            model=settings.IMAGE_MODEL,
            aspect_ratio=settings.IMAGE_ASPECT_RATIO,
            client=client,
        )
    else:
        logger.info("Image generation disabled via GENERATE_IMAGES=false")
    chat_backend = GeminiChatBackend(api_key=settings.GEMINI_API_KEY, model=settings.CHAT_MODEL, client=client)
    logger.info(
        f"✓ Models: structured={settings.GEMINI_MODEL}, chat={settings.CHAT_MODEL}, "
        f"image={settings.IMAGE_MODEL if image_client else 'off'}"
    )

    logger.info("Step 3/3: Building orchestrators...")
    assistant = KitchenAssistant(
        discovery=DishDiscoveryOrchestrator(structured, suggestion_count=settings.SUGGESTION_COUNT),
        expansion=RecipeExpansionOrchestrator(structured, image_client),
        chat_backend=chat_backend,
    )
    logger.info("✓ Kitchen assistant ready")
    return assistant
