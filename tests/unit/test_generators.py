"""
Unit tests for graphweaver.generators package.

Providers are mocked; no network calls are made.
"""

import pytest
from unittest.mock import AsyncMock, Mock

from ai_providers import AIProviderType, AIResponse
from graphweaver.generators import (
    GENERATOR_REGISTRY,
    FrontMatterGenerator,
    GenerationError,
    WikilinkGenerator,
    build_generators,
    create_generator,
    strip_code_fences,
)
from graphweaver.interfaces import GenerationInput
from graphweaver.text import split_front_matter


def mock_provider(reply: str) -> Mock:
    """Provider whose complete() always returns reply."""
    provider = Mock()
    provider.complete = AsyncMock(return_value=AIResponse(
        content=reply,
        model="test-model",
        provider=AIProviderType.CLAUDE,
        usage={"input_tokens": 10, "output_tokens": 5},
    ))
    return provider


def sent_prompt(provider: Mock) -> str:
    messages = provider.complete.call_args.args[0]
    return messages[0].content


class TestStripCodeFences:
    """Tests for strip_code_fences."""

    def test_fenced(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_unfenced(self):
        assert strip_code_fences('  {"a": 1} ') == '{"a": 1}'


class TestFrontMatterGenerator:
    """Tests for FrontMatterGenerator."""

    def test_parse_json(self):
        assert FrontMatterGenerator.parse_response('{"title": "A", "tags": ["x"]}') == {
            "title": "A", "tags": ["x"],
        }

    def test_parse_fenced_json(self):
        assert FrontMatterGenerator.parse_response('```json\n{"title": "A"}\n```') == {"title": "A"}

    def test_parse_yaml_block(self):
        """A YAML block between '---' lines is accepted."""
        reply = "---\ntitle: Note\ntags: [a, b]\n---"
        assert FrontMatterGenerator.parse_response(reply) == {"title": "Note", "tags": ["a", "b"]}

    @pytest.mark.parametrize("reply", [
        "I cannot help with that",
        "[1, 2]",
        "{}",
        "title: [unclosed",
    ])
    def test_parse_rejects_non_mapping(self, reply):
        with pytest.raises(GenerationError):
            FrontMatterGenerator.parse_response(reply)

    @pytest.mark.asyncio
    async def test_empty_note_rejected(self):
        provider = mock_provider('{"title": "A"}')
        with pytest.raises(ValueError, match="empty"):
            await FrontMatterGenerator(provider).generate(GenerationInput(content="  \n", path="e.md"))
        provider.complete.assert_not_called()

    @pytest.mark.asyncio
    async def test_generate_prepends_front_matter(self):
        provider = mock_provider('{"title": "Meeting", "tags": ["work"], "aliases": []}')
        generator = FrontMatterGenerator(provider)

        output = await generator.generate(GenerationInput(content="Notes from the meeting.", path="m.md"))

        data, body = split_front_matter(output.content)
        assert data == {"title": "Meeting", "tags": ["work"], "aliases": []}
        assert body.strip() == "Notes from the meeting."
        assert output.metadata["front_matter"] == data

    @pytest.mark.asyncio
    async def test_prompt_includes_custom_tags_and_properties(self):
        provider = mock_provider('{"title": "A"}')
        generator = FrontMatterGenerator(
            provider,
            custom_tags=["project", "idea"],
            custom_properties=["status: draft or final"],
        )

        await generator.generate(GenerationInput(content="Some content", path="a.md"))

        prompt = sent_prompt(provider)
        assert "project, idea" in prompt
        assert "status: draft or final" in prompt
        assert "Some content" in prompt
        assert "a.md" in prompt

    @pytest.mark.asyncio
    async def test_model_override_passed_to_provider(self):
        provider = mock_provider('{"title": "A"}')
        await FrontMatterGenerator(provider, model="claude-3-5-haiku-20241022").generate(
            GenerationInput(content="x")
        )
        assert provider.complete.call_args.kwargs["model"] == "claude-3-5-haiku-20241022"
        assert provider.complete.call_args.kwargs["system_prompt"]

    @pytest.mark.asyncio
    async def test_provider_error_propagates(self):
        """Errors reach the caller so the batch retry policy applies."""
        provider = Mock()
        provider.complete = AsyncMock(side_effect=ConnectionError("offline"))

        with pytest.raises(ConnectionError):
            await FrontMatterGenerator(provider).generate(GenerationInput(content="x"))


class TestWikilinkGenerator:
    """Tests for WikilinkGenerator."""

    @pytest.mark.parametrize("reply,expected", [
        ('["Alpha", "Beta"]', ["Alpha", "Beta"]),
        ('```json\n["Alpha"]\n```', ["Alpha"]),
        ('{"links": ["Alpha", "Beta"]}', ["Alpha", "Beta"]),
        ('Suggestions: ["Alpha", 3, ""]', ["Alpha"]),
        (["Alpha", None], ["Alpha"]),
        ("[]", []),
    ])
    def test_parse_suggested_links(self, reply, expected):
        assert WikilinkGenerator.parse_suggested_links(reply) == expected

    @pytest.mark.parametrize("reply", [
        "no suggestions",
        '{"count": 2}',
        "Links: [Alpha, Beta]",
        "42",
    ])
    def test_parse_rejects_unusable_reply(self, reply):
        with pytest.raises(GenerationError):
            WikilinkGenerator.parse_suggested_links(reply)

    @pytest.mark.asyncio
    async def test_unusable_reply_fails_generation(self):
        """An unusable reply raises so the batch retries the file."""
        provider = mock_provider("I could not find any links.")
        with pytest.raises(GenerationError):
            await WikilinkGenerator(provider).generate(GenerationInput(content="Plain note.", path="p.md"))

    @pytest.mark.asyncio
    async def test_generate_links_body_only(self):
        """Front matter is never rewritten."""
        provider = mock_provider('["Alpha", "Beta", "title"]')
        content = "---\ntitle: Alpha\n---\nAlpha links to Beta."

        output = await WikilinkGenerator(provider).generate(
            GenerationInput(content=content, path="alpha.md", existing_pages=["Beta", "Gamma"])
        )

        assert output.content == "---\ntitle: Alpha\n---\n[[Alpha]] links to [[Beta]]."
        assert output.metadata["added"] == ["Alpha", "Beta"]
        assert "Beta, Gamma" in sent_prompt(provider)

    @pytest.mark.asyncio
    async def test_no_suggestions_leaves_content(self):
        provider = mock_provider("[]")
        output = await WikilinkGenerator(provider).generate(GenerationInput(content="Plain note."))
        assert output.content == "Plain note."
        assert output.metadata["added"] == []


class TestFactory:
    """Tests for the generator registry."""

    def test_registry_keys(self):
        assert set(GENERATOR_REGISTRY) == {"front_matter", "wikilinks"}

    def test_create_generator(self):
        provider = mock_provider("{}")
        generator = create_generator("wikilinks", provider, custom_tags=["x"])
        assert isinstance(generator, WikilinkGenerator)
        assert generator.custom_tags == ["x"]

    def test_unknown_generator(self):
        with pytest.raises(ValueError, match="Unknown generator"):
            create_generator("summary", mock_provider("{}"))

    def test_build_generators(self):
        provider = mock_provider("{}")
        generators = build_generators(provider, custom_properties=["status"])
        assert isinstance(generators["front_matter"], FrontMatterGenerator)
        assert isinstance(generators["wikilinks"], WikilinkGenerator)
        assert generators["front_matter"].custom_properties == ["status"]
        assert generators["wikilinks"].provider is provider
