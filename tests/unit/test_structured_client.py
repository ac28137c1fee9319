"""Unit tests for schema-validated structured generation."""

import json
import logging
from types import SimpleNamespace

import pytest
from google.genai import errors

from sous_chef.clients.structured import StructuredGenerationClient, parse_structured_response
from sous_chef.models.models import DishSuggestion, Recipe
from sous_chef.prompts.schemas import DISH_SUGGESTIONS, RECIPE
from sous_chef.utils.errors import SchemaValidationError, TransportError


@pytest.fixture
def suggestion(suggestions_payload):
    """Factory for a single suggestion dict with overrides."""

    def _make(**overrides) -> dict:
        return dict(suggestions_payload[0], **overrides)

    return _make


class TestParseStructuredResponse:
    """Test local validation of untrusted backend text."""

    def test_valid_suggestions(self, suggestions_json):
        """Valid JSON array should parse into DishSuggestion records in order."""
        result = parse_structured_response(suggestions_json, DISH_SUGGESTIONS)
        assert [dish.title for dish in result] == ["Spinach Omelette", "Savory Crepes"]
        assert all(isinstance(dish, DishSuggestion) for dish in result)
        assert result[1].match_score == 78.5
        assert result[0].prep_time == "15 mins"

    def test_valid_recipe(self, recipe_json):
        """Valid recipe JSON should parse into a Recipe."""
        recipe = parse_structured_response(recipe_json, RECIPE)
        assert isinstance(recipe, Recipe)
        assert recipe.nutritional_info == "Approx. 320 kcal, 21g protein"
        assert recipe.instructions[0] == "Whisk eggs with flour"

    def test_code_fence_is_stripped(self, suggestions_json):
        """A single markdown code fence around the JSON is tolerated."""
        fenced = f"```json\n{suggestions_json}\n```"
        assert len(parse_structured_response(fenced, DISH_SUGGESTIONS)) == 2

    def test_missing_match_score_is_rejected(self, suggestion):
        """A suggestion without matchScore must fail, never default."""
        item = suggestion()
        del item["matchScore"]
        with pytest.raises(SchemaValidationError) as exc:
            parse_structured_response(json.dumps([item]), DISH_SUGGESTIONS)
        assert exc.value.contract == "dish suggestions"
        assert any("matchScore" in error["loc"] for error in exc.value.errors)

    def test_unknown_difficulty_is_rejected(self, suggestion):
        """Difficulty outside Easy/Medium/Hard must fail."""
        payload = json.dumps([suggestion(difficulty="Extreme")])
        with pytest.raises(SchemaValidationError):
            parse_structured_response(payload, DISH_SUGGESTIONS)

    @pytest.mark.parametrize("score", [0, 101, -5, 100.5])
    def test_match_score_out_of_range_is_rejected(self, score, suggestion):
        """matchScore must stay within [1, 100]."""
        payload = json.dumps([suggestion(matchScore=score)])
        with pytest.raises(SchemaValidationError):
            parse_structured_response(payload, DISH_SUGGESTIONS)

    @pytest.mark.parametrize("score", [1, 100, 55.5])
    def test_match_score_bounds_accepted(self, score, suggestion):
        """Boundary scores are valid."""
        payload = json.dumps([suggestion(matchScore=score)])
        assert parse_structured_response(payload, DISH_SUGGESTIONS)[0].match_score == score

    def test_string_match_score_is_not_coerced(self, suggestion):
        """A numeric string is a wrong type, not a number."""
        payload = json.dumps([suggestion(matchScore="85")])
        with pytest.raises(SchemaValidationError):
            parse_structured_response(payload, DISH_SUGGESTIONS)

    def test_numeric_id_is_not_coerced(self, suggestion):
        """id must be a string."""
        payload = json.dumps([suggestion(id=7)])
        with pytest.raises(SchemaValidationError):
            parse_structured_response(payload, DISH_SUGGESTIONS)

    def test_object_instead_of_array_is_rejected(self, suggestion):
        """Suggestions must be a list."""
        with pytest.raises(SchemaValidationError):
            parse_structured_response(json.dumps(suggestion()), DISH_SUGGESTIONS)

    def test_recipe_with_empty_instructions_is_rejected(self, recipe_payload):
        """Recipes need at least one instruction."""
        payload = dict(recipe_payload, instructions=[])
        with pytest.raises(SchemaValidationError):
            parse_structured_response(json.dumps(payload), RECIPE)

    def test_recipe_missing_nutritional_info_is_rejected(self, recipe_payload):
        """nutritionalInfo is required."""
        payload = dict(recipe_payload)
        del payload["nutritionalInfo"]
        with pytest.raises(SchemaValidationError):
            parse_structured_response(json.dumps(payload), RECIPE)

    def test_malformed_json_is_rejected(self):
        """Truncated JSON should raise SchemaValidationError."""
        with pytest.raises(SchemaValidationError):
            parse_structured_response('[{"id": "1", "title": "Soup"', DISH_SUGGESTIONS)

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_empty_response_is_rejected(self, text):
        """Empty text is not an empty list."""
        with pytest.raises(SchemaValidationError, match="Empty response"):
            parse_structured_response(text, DISH_SUGGESTIONS)

    def test_schema_error_is_value_error(self):
        """SchemaValidationError stays catchable as ValueError."""
        with pytest.raises(ValueError):
            parse_structured_response("not json", RECIPE)


class TestStructuredGenerationClient:
    """Test the backend call wrapper."""

    def test_requires_api_key_or_client(self):
        """Missing credentials should fail at construction."""
        with pytest.raises(ValueError, match="GEMINI_API_KEY"):
            StructuredGenerationClient(api_key="", model="m")

    @pytest.mark.asyncio
    async def test_generate_returns_validated_records(self, genai_client, suggestions_json):
        """generate() should return typed records from the backend text."""
        genai_client.models.generate_content.return_value = SimpleNamespace(text=suggestions_json)
        client = StructuredGenerationClient(api_key="key", model="gemini-test", client=genai_client)

        result = await client.generate("prompt", DISH_SUGGESTIONS)

        assert [dish.id for dish in result] == ["dish-1", "dish-2"]

    @pytest.mark.asyncio
    async def test_generate_declares_json_schema(self, genai_client, recipe_json):
        """The declared schema and JSON mime type are sent to the backend."""
        genai_client.models.generate_content.return_value = SimpleNamespace(text=recipe_json)
        client = StructuredGenerationClient(api_key="key", model="gemini-test", temperature=0.3, client=genai_client)

        await client.generate("Make a recipe", RECIPE)

        kwargs = genai_client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-test"
        assert kwargs["contents"] == "Make a recipe"
        assert kwargs["config"].response_mime_type == "application/json"
        assert kwargs["config"].response_schema == RECIPE.schema
        assert kwargs["config"].temperature == 0.3

    @pytest.mark.asyncio
    async def test_api_error_becomes_transport_error(self, genai_client):
        """Quota/auth errors from the SDK surface as TransportError with status code."""
        genai_client.models.generate_content.side_effect = errors.ClientError(
            429, {"error": {"code": 429, "message": "Resource exhausted", "status": "RESOURCE_EXHAUSTED"}}
        )
        client = StructuredGenerationClient(api_key="key", model="m", client=genai_client)

        with pytest.raises(TransportError) as exc:
            await client.generate("prompt", DISH_SUGGESTIONS)
        assert exc.value.status_code == 429
        assert isinstance(exc.value.__cause__, errors.APIError)

    @pytest.mark.asyncio
    async def test_network_error_becomes_transport_error(self, genai_client):
        """Connection failures surface as TransportError."""
        genai_client.models.generate_content.side_effect = ConnectionError("connection reset")
        client = StructuredGenerationClient(api_key="key", model="m", client=genai_client)

        with pytest.raises(TransportError, match="connection reset"):
            await client.generate("prompt", DISH_SUGGESTIONS)

    @pytest.mark.asyncio
    async def test_no_retries(self, genai_client):
        """Failures are not retried."""
        genai_client.models.generate_content.side_effect = ConnectionError("down")
        client = StructuredGenerationClient(api_key="key", model="m", client=genai_client)

        with pytest.raises(TransportError):
            await client.generate("prompt", DISH_SUGGESTIONS)
        assert genai_client.models.generate_content.call_count == 1

    @pytest.mark.asyncio
    async def test_invalid_backend_answer_raises_schema_error(self, genai_client):
        """A conforming-looking but invalid answer is rejected."""
        bad = [{"id": "1", "title": "Soup", "description": "", "difficulty": "Easy", "prepTime": "5m"}]
        genai_client.models.generate_content.return_value = SimpleNamespace(text=json.dumps(bad))
        client = StructuredGenerationClient(api_key="key", model="m", client=genai_client)

        with pytest.raises(SchemaValidationError):
            await client.generate("prompt", DISH_SUGGESTIONS)

    @pytest.mark.asyncio
    async def test_rejection_is_logged_with_operation(self, genai_client, caplog):
        """Log records carry the contract name as their operation."""
        genai_client.models.generate_content.return_value = SimpleNamespace(text="[{}]")
        client = StructuredGenerationClient(api_key="key", model="m", client=genai_client)

        with caplog.at_level(logging.WARNING, logger="sous_chef"):
            with pytest.raises(SchemaValidationError):
                await client.generate("prompt", DISH_SUGGESTIONS)

        rejected = [r for r in caplog.records if r.getMessage().startswith("Rejected dish suggestions")]
        assert rejected and rejected[0].operation == "dish suggestions"
