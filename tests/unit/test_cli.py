"""
Unit tests for graphweaver.cli module.
"""

import json
import pytest
from unittest.mock import AsyncMock, Mock, patch

from ai_providers import AIProviderType, AIResponse
from config.settings import Settings
from graphweaver.cli import _overrides, build_parser, main, run


def make_settings(tmp_path, **overrides) -> Settings:
    values = dict(
        anthropic_api_key="test-key",
        provider="claude",
        model="",
        max_retries=0,
        retry_delay_ms=0,
        delay_between_chunks_ms=0,
        generate_front_matter=True,
        generate_wikilinks=False,
        stats_file=tmp_path / "stats.json",
        stats_save_debounce_ms=0,
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_manager(reply=None, error=None):
    provider = Mock()
    provider.complete = AsyncMock(
        return_value=AIResponse(content=reply or "", model="test", provider=AIProviderType.CLAUDE),
        side_effect=error,
    )
    manager = Mock()
    manager.get_provider = AsyncMock(return_value=provider)
    return manager, provider


@pytest.fixture
def vault(tmp_path):
    root = tmp_path / "vault"
    root.mkdir()
    (root / "Inbox.md").write_text("Things to file.", encoding="utf-8")
    (root / "Done.md").write_text("---\ntitle: Done\n---\nFinished.", encoding="utf-8")
    return root


class TestParser:
    """Tests for build_parser and _overrides."""

    def test_defaults(self):
        args = build_parser().parse_args(["notes"])

        assert args.vault == "notes"
        assert args.front_matter is None
        assert args.wikilinks is None
        assert _overrides(args) == {}

    def test_flags(self):
        args = build_parser().parse_args([
            "notes", "--no-front-matter", "--wikilinks",
            "--chunk-size", "5", "--delay-ms", "0", "--max-retries", "1", "--concurrency", "2",
            "--provider", "openai", "--model", "gpt-4o",
        ])

        assert args.front_matter is False
        assert args.wikilinks is True
        assert args.provider == "openai"
        assert args.model == "gpt-4o"
        assert _overrides(args) == {
            "chunk_size": 5,
            "delay_between_chunks_ms": 0,
            "max_retries": 1,
            "max_concurrent_processing": 2,
        }

    def test_unknown_provider_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["notes", "--provider", "gemini"])


class TestRun:
    """Tests for the run() entry point."""

    @pytest.mark.asyncio
    async def test_processes_vault(self, tmp_path, vault):
        manager, provider = make_manager(reply='{"title": "Inbox", "tags": ["todo"]}')
        args = build_parser().parse_args([str(vault)])

        with patch("graphweaver.cli.create_provider_manager", return_value=manager) as create:
            code = await run(args, make_settings(tmp_path))

        assert code == 0
        create.assert_called_once_with("claude", api_keys={"claude": "test-key", "openai": ""})
        manager.get_provider.assert_awaited_once_with(AIProviderType.CLAUDE, model=None)
        # Done.md already has front matter
        assert provider.complete.await_count == 1

        inbox = (vault / "Inbox.md").read_text(encoding="utf-8")
        assert inbox.startswith("---\ntitle: Inbox\n")
        assert inbox.endswith("Things to file.")

        history = json.loads((tmp_path / "stats.json").read_text(encoding="utf-8"))["history"]
        assert history[0]["total_files"] == 2
        assert history[0]["processed_files"] == 2
        assert history[0]["skipped_files"] == 1

    @pytest.mark.asyncio
    async def test_failures_return_nonzero(self, tmp_path, vault, capsys):
        manager, _ = make_manager(error=RuntimeError("rate limited"))
        args = build_parser().parse_args([str(vault)])

        with patch("graphweaver.cli.create_provider_manager", return_value=manager):
            code = await run(args, make_settings(tmp_path))

        assert code == 1
        assert "Inbox.md" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_empty_vault(self, tmp_path):
        empty = tmp_path / "empty"
        empty.mkdir()
        args = build_parser().parse_args([str(empty)])

        with patch("graphweaver.cli.create_provider_manager") as create:
            code = await run(args, make_settings(tmp_path))

        assert code == 0
        create.assert_not_called()

    @pytest.mark.asyncio
    async def test_vault_required(self, tmp_path):
        args = build_parser().parse_args([])
        with pytest.raises(ValueError, match="vault"):
            await run(args, make_settings(tmp_path, vault_dir=None))


class TestMain:
    """Tests for main()."""

    def test_missing_vault_directory(self, tmp_path, capsys):
        code = main([str(tmp_path / "missing")])

        assert code == 1
        assert "Vault directory not found" in capsys.readouterr().err
