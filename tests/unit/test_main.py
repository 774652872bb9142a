# tests/unit/test_main.py — v2
"""Tests for main.py — CLI entry point."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from storykeeper.config.settings import Settings
from storykeeper.main import _build_parser, main


# ---------------------------------------------------------------------------
# Parser tests
# ---------------------------------------------------------------------------

class TestBuildParser:
    def test_version_flag(self, capsys):
        parser = _build_parser()
        with pytest.raises(SystemExit) as exc_info:
            parser.parse_args(["--version"])
        assert exc_info.value.code == 0

    def test_validate_subcommand(self):
        args = _build_parser().parse_args(["validate", "12"])
        assert args.command == "validate"
        assert args.story_id == 12

    def test_aggregate_subcommand(self):
        args = _build_parser().parse_args(["-v", "aggregate", "3"])
        assert args.verbose is True
        assert args.story_id == 3

    def test_story_id_must_be_int(self):
        with pytest.raises(SystemExit):
            _build_parser().parse_args(["validate", "abc"])


# ---------------------------------------------------------------------------
# Command tests
# ---------------------------------------------------------------------------

@pytest.fixture
def run_cli(coordinator):
    """Run main() against the in-memory coordinator fixture."""
    def run(*argv: str) -> int:
        with patch("storykeeper.config.settings.load_settings", return_value=Settings(_env_file=None)), \
             patch("storykeeper.main._setup_logging"), \
             patch("storykeeper.main._build", return_value=coordinator):
            return main(list(argv))

    return run


class TestMain:
    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out

    def test_validate_allowed(self, run_cli, published_story, capsys):
        assert run_cli("validate", str(published_story)) == 0
        assert "can be published" in capsys.readouterr().out

    def test_validate_blocked(self, run_cli, coordinator, ctx, story_form, capsys):
        story_id = coordinator.publication.create_story(ctx, story_form()).story_id
        assert run_cli("validate", str(story_id)) == 2
        out = capsys.readouterr().out
        assert "genre:" in out
        assert "published_chapters:" in out

    def test_aggregate(self, run_cli, published_story, capsys):
        assert run_cli("aggregate", str(published_story)) == 0
        out = capsys.readouterr().out
        assert "Chapters:  1" in out
        assert "Valid:     yes" in out

    def test_automate_statuses(self, run_cli, terms, capsys):
        assert run_cli("automate-statuses") == 0
        assert "Scanned:       0" in capsys.readouterr().out

    def test_flush_cache(self, run_cli, coordinator, cache, keys, capsys):
        cache.set(keys.word_count(1), 5, 60)
        assert run_cli("flush-cache") == 0
        assert "Flushed 1 cache entries." in capsys.readouterr().out

    def test_fatal_error_returns_1(self, run_cli, coordinator):
        with patch.object(coordinator, "can_publish_story", side_effect=RuntimeError("boom")):
            assert run_cli("validate", "1") == 1
