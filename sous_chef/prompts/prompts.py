"""Prompts and fixed texts for the Sous Chef generation core.

Prompt builders are plain functions so orchestrators and tests share one
wording. The chef persona, greeting and fallback reply are fixed for the
lifetime of a conversation.
"""

from typing import Iterable

from sous_chef.models.models import CourseType


CHEF_PERSONA = (
    "You are a world-class Michelin-star chef assistant. You help users with cooking techniques, "
    "ingredient substitutions, and general kitchen advice. Keep your tone encouraging, professional, "
    "and helpful."
)

GREETING = "Hello! I am your AI Sous Chef. How can I help you in the kitchen today?"

FALLBACK_REPLY = "I'm sorry, I encountered an issue. Please try again."


def _join(ingredients: Iterable[str]) -> str:
    return ", ".join(ingredients)


def build_suggestion_prompt(ingredients: Iterable[str], course: CourseType, count: int = 4) -> str:
    """Prompt asking for dishes built around the given ingredients.

    Args:
        ingredients: Pantry ingredients (at least one).
        course: Course the dishes belong to.
        count: Number of dishes to ask for. The model may not honour it exactly.

    Returns:
        str: Prompt text for structured generation.
    """
    return (
        f"Based on these ingredients: {_join(ingredients)}, suggest {count} creative {course.value} dishes.\n"
        "Only suggest dishes where these ingredients are central or easy to supplement with common "
        "pantry staples.\n"
        "For each dish give a short id, the title, a one-sentence description, a difficulty "
        "(Easy, Medium or Hard), an approximate prep time, and a matchScore from 1 to 100 for how "
        "well the dish fits the ingredients."
    )


def build_recipe_prompt(dish_title: str, ingredients: Iterable[str]) -> str:
    """Prompt asking for the full recipe of a selected dish."""
    return (
        f'Create a detailed recipe for "{dish_title}" using these primary ingredients: {_join(ingredients)}.\n'
        "Include specific measurements, step-by-step instructions, chef's tips, and basic nutritional info."
    )


def build_image_prompt(subject: str) -> str:
    """Food photography prompt for the dish image."""
    return (
        f"A high-end, professional food photography shot of {subject}. "
        "Beautiful plating, warm lighting, rustic kitchen background."
    )
