#!/usr/bin/env python3
"""Ad hoc runner for the Sous Chef generation core.

Run discovery, recipe expansion and chat directly from the terminal.

Usage:
    python query.py egg flour spinach                      # Main Course suggestions
    python query.py --course dessert egg flour sugar       # Pick a course
    python query.py --pick 1 egg flour spinach             # Expand the first suggestion
    python query.py --pick 2 --no-image egg flour          # Skip the dish photo
    python query.py --debug egg flour                      # Show full JSON
    python query.py --chat "How do I fold egg whites?"     # Stream a chef reply
"""

import asyncio
import sys

from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table

from sous_chef.agents.kitchen import KitchenAssistant, initialize_kitchen_assistant
from sous_chef.models.models import CourseType, ExpandedRecipe
from sous_chef.utils.config import Config
from sous_chef.utils.errors import GenerationError
from sous_chef.utils.logger import logger

console = Console()

USAGE = 'Usage: python query.py [--course NAME] [--pick N] [--no-image] [--debug] <ingredient> ... | --chat "<question>"'


def render_recipe_markdown(expanded: ExpandedRecipe) -> str:
    """Render an expanded recipe as markdown for terminal display."""
    recipe = expanded.recipe
    lines = [f"# {recipe.title}", "", "## Ingredients"]
    lines += [f"- {item}" for item in recipe.ingredients]
    lines += ["", "## Instructions"]
    lines += [f"{number}. {step}" for number, step in enumerate(recipe.instructions, start=1)]
    lines += ["", "## Chef's Tips"]
    lines += [f"- {tip}" for tip in recipe.tips]
    lines += ["", "## Nutrition", recipe.nutritional_info]
    return "\n".join(lines)


def print_suggestions(assistant: KitchenAssistant) -> None:
    table = Table(title=f"{assistant.course.value} ideas for {', '.join(assistant.ingredients)}")
    table.add_column("#", justify="right")
    table.add_column("Dish", style="bold")
    table.add_column("Difficulty")
    table.add_column("Prep")
    table.add_column("Match", justify="right")
    table.add_column("Description")
    for number, dish in enumerate(assistant.suggestions, start=1):
        table.add_row(
            str(number), dish.title, dish.difficulty, dish.prep_time, f"{dish.match_score:.0f}", dish.description
        )
    console.print(table)


async def run_discovery(
    ingredients: list[str], course: CourseType, pick: int = 0, debug: bool = False, with_image: bool = True
) -> None:
    """Discover dishes for the ingredients and optionally expand one of them.

    Args:
        ingredients: Pantry ingredients.
        course: Course to suggest dishes for.
        pick: 1-based suggestion to expand (0 = none).
        debug: If True, display full JSON of every result.
        with_image: If False, skip dish photo generation.
    """
    settings = Config()
    settings.GENERATE_IMAGES = with_image
    assistant = initialize_kitchen_assistant(settings)
    for ingredient in ingredients:
        assistant.add_ingredient(ingredient)
    assistant.course = course

    await assistant.find_dishes()
    if debug:
        console.print_json(data=[dish.model_dump(by_alias=True) for dish in assistant.suggestions])
    print_suggestions(assistant)

    if not pick:
        return
    if pick < 0 or pick > len(assistant.suggestions):
        console.print(f"[red]✗ Only {len(assistant.suggestions)} suggestion(s) available[/red]")
        sys.exit(1)

    expanded = await assistant.select_dish(assistant.suggestions[pick - 1])
    console.print()
    if debug:
        data = expanded.model_dump(by_alias=True)
        if data["image"]:
            data["image"] = f"{data['image'][:60]}... ({len(data['image'])} chars)"
        console.print_json(data=data)
    console.print(Markdown(render_recipe_markdown(expanded)))
    console.print()
    if expanded.image:
        console.print(f"[green]✓ Dish photo generated ({len(expanded.image) / 1024:.1f} KB data URI)[/green]")
    else:
        console.print("[dim]No dish photo for this recipe[/dim]")


async def run_chat(question: str) -> None:
    """Stream one chef reply to the terminal."""
    assistant = initialize_kitchen_assistant(Config())
    session = assistant.chat
    console.print(f"[bold]{session.transcript[0].text}[/bold]\n")

    shown = ""

    def show(reply: str) -> None:
        nonlocal shown
        console.print(reply[len(shown):], end="", markup=False, highlight=False)
        shown = reply

    def replace(reply: str) -> None:
        if shown:
            console.print()
        console.print(reply, end="", markup=False, highlight=False, style="yellow")

    session.subscribe(show, on_replaced=replace)
    await session.send(question)
    console.print()


def main(argv: list[str]) -> None:
    if len(argv) < 2:
        print(USAGE)
        print("")
        print("Examples:")
        print("  python query.py egg flour spinach")
        print("  python query.py --course dessert --pick 1 egg flour sugar")
        print('  python query.py --chat "What can I use instead of buttermilk?"')
        sys.exit(1)

    debug_mode = False
    with_image = True
    course = CourseType.MAIN_COURSE
    pick = 0
    chat_question = None
    argv_start = 1

    while argv_start < len(argv) and argv[argv_start].startswith("--"):
        flag = argv[argv_start]
        if flag == "--debug":
            debug_mode = True
            argv_start += 1
        elif flag == "--no-image":
            with_image = False
            argv_start += 1
        elif flag in ("--course", "--pick", "--chat"):
            argv_start += 1
            if argv_start >= len(argv):
                print(f"Error: {flag} flag requires a value")
                sys.exit(1)
            value = argv[argv_start]
            argv_start += 1
            try:
                if flag == "--course":
                    course = CourseType.parse(value)
                elif flag == "--pick":
                    pick = int(value)
                    if pick < 0:
                        raise ValueError(f"--pick must be a positive number, got {pick}")
                else:
                    chat_question = value
            except ValueError as e:
                print(f"Error: {e}")
                sys.exit(1)
        else:
            print(f"Unknown flag: {flag}")
            sys.exit(1)

    try:
        if chat_question is not None:
            asyncio.run(run_chat(" ".join([chat_question, *argv[argv_start:]])))
            return

        ingredients = argv[argv_start:]
        if not ingredients:
            print("Error: No ingredients provided")
            print(USAGE)
            sys.exit(1)
        asyncio.run(run_discovery(ingredients, course, pick=pick, debug=debug_mode, with_image=with_image))
    except KeyboardInterrupt:
        logger.info("\nQuery interrupted by user.")
        sys.exit(0)
    except (GenerationError, ValueError) as e:
        logger.error(f"Query failed: {e}")
        sys.exit(1)


def cli() -> None:
    """Console script entry point."""
    main(sys.argv)


if __name__ == "__main__":
    cli()
