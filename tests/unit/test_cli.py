"""
Unit tests for translate_markdown.py - command line entry point
"""
import pytest

import translate_markdown
from translate_markdown import build_parser, main, settings_from_args


class FakeClient:
    """Stands in for OpenAICompatibleClient"""

    def __init__(self):
        self.calls = 0

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def translate(self, text):
        self.calls += 1
        return text.replace("Hello", "Olá")


@pytest.fixture
def cli_settings(monkeypatch, test_settings):
    monkeypatch.setattr(translate_markdown, "settings", test_settings)
    return test_settings


@pytest.fixture
def fake_client(monkeypatch):
    client = FakeClient()
    monkeypatch.setattr(translate_markdown, "create_client", lambda config: client)
    return client


class TestArguments:
    """Test argument parsing."""

    def test_overrides(self, test_settings):
        args = build_parser().parse_args(["docs", "--max-bytes", "512", "--chunks", "2", "--no-progress"])
        config = settings_from_args(args, test_settings)

        assert config.max_chunk_bytes == 512
        assert config.max_concurrent_chunks == 2
        assert config.max_concurrent_files == test_settings.max_concurrent_files
        assert config.show_progress is False

    def test_invalid_limit(self, tmp_path, cli_settings, capsys):
        (tmp_path / "a.md").write_text("# A\n", encoding="utf-8")
        assert main([str(tmp_path), "--chunks", "0"]) == 1
        assert "max_concurrent_chunks" in capsys.readouterr().out


class TestMain:
    """Test commands end to end."""

    def test_missing_path(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope")]) == 1
        assert "Path not found" in capsys.readouterr().out

    def test_no_files(self, tmp_path, cli_settings, capsys):
        assert main([str(tmp_path)]) == 1
        assert "No .md files found" in capsys.readouterr().out

    def test_info(self, tmp_path, cli_settings, capsys):
        (tmp_path / "a.md").write_text("# A\n", encoding="utf-8")
        (tmp_path / "b.md").write_text("<!-- ia-translate: true -->\n# B\n", encoding="utf-8")

        assert main([str(tmp_path), "--info"]) == 0
        out = capsys.readouterr().out
        assert "Translated: 1 | Large: 0 | Pending: 1" in out

    def test_lint_reports_invalid(self, tmp_path, cli_settings, capsys):
        (tmp_path / "a.md").write_text("See [x][missing].\n", encoding="utf-8")

        assert main([str(tmp_path), "--lint"]) == 1
        assert 'missing definition for "missing"' in capsys.readouterr().out

    def test_translate(self, tmp_path, cli_settings, fake_client):
        path = tmp_path / "a.md"
        path.write_text("# Hello\n\nHello world.\n", encoding="utf-8")

        assert main([str(path), "--no-progress"]) == 0
        assert path.read_text(encoding="utf-8") == "<!-- ia-translate: true -->\n# Olá\n\nOlá world.\n"
        assert fake_client.calls == 1

    def test_translate_rejected_exit_code(self, tmp_path, cli_settings, monkeypatch):
        class DroppingClient(FakeClient):
            async def translate(self, text):
                return text.replace("## Part\n", "")

        monkeypatch.setattr(translate_markdown, "create_client", lambda config: DroppingClient())
        path = tmp_path / "a.md"
        path.write_text("# Doc\n\n## Part\n\ntext\n", encoding="utf-8")

        assert main([str(tmp_path), "--no-progress"]) == 1
        assert (tmp_path / "a_structure_invalid.md").exists()
