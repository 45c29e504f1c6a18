"""Tests for the typer command-line interface."""

from unittest.mock import MagicMock

import pytest
from typer.testing import CliRunner

import main
from tests.helpers import failed, ok, words

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_service(service, monkeypatch):
    monkeypatch.setattr(main, "_build_service", lambda config: service)
    return service


class TestToken:
    def test_issues_verifiable_token(self, cli_service):
        result = runner.invoke(main.app, ["token", "--user", "carol"])

        assert result.exit_code == 0
        assert cli_service.authenticate(result.stdout.strip()) == "carol"


class TestWrite:
    def test_writes_to_output_file(self, mock_client, token, tmp_path):
        mock_client.complete.side_effect = [ok(words(950), ["https://a.example"])]
        output = tmp_path / "out" / "essay.md"

        result = runner.invoke(
            main.app,
            ["write", "--topic", "Glaciers", "--words", "1000", "--output", str(output), "--token", token],
        )

        assert result.exit_code == 0, result.output
        assert output.read_text(encoding="utf-8") == words(950)
        assert "Word count: 950/1000" in result.stdout
        assert "https://a.example" in result.stdout

    def test_save_flag(self, cli_service, mock_client, token):
        mock_client.complete.side_effect = [ok(words(950))]

        result = runner.invoke(main.app, ["write", "--topic", "Glaciers", "--save", "--token", token])

        assert result.exit_code == 0, result.output
        assert len(cli_service.list_essays(token)) == 1

    def test_token_from_environment(self, mock_client, token):
        mock_client.complete.side_effect = [ok(words(950))]

        result = runner.invoke(main.app, ["write", "--topic", "Glaciers"], env={"ESSAY_WRITER_TOKEN": token})

        assert result.exit_code == 0, result.output

    def test_missing_token(self, mock_client):
        result = runner.invoke(main.app, ["write", "--topic", "Glaciers"], env={"ESSAY_WRITER_TOKEN": ""})

        assert result.exit_code == 1
        assert "Authentication required" in result.output
        mock_client.complete.assert_not_called()

    def test_upstream_failure(self, mock_client, token):
        mock_client.complete.side_effect = [failed()]

        result = runner.invoke(main.app, ["write", "--topic", "Glaciers", "--token", token])

        assert result.exit_code == 1
        assert "Failed to generate essay" in result.output


class TestReviewTweakCite:
    def test_review_file(self, mock_client, token, tmp_path):
        essay_file = tmp_path / "essay.md"
        essay_file.write_text("Essay body", encoding="utf-8")
        mock_client.complete.return_value = ok(
            '{"ratings": {"grammar": 8, "structure": 7, "substance": 6, "overall": 7}, "suggestions": ["Add data"]}'
        )

        result = runner.invoke(main.app, ["review", "--file", str(essay_file), "--token", token])

        assert result.exit_code == 0, result.output
        assert "Grammar:   8/10" in result.stdout
        assert "- Add data" in result.stdout

    def test_review_needs_a_source(self, token):
        result = runner.invoke(main.app, ["review", "--token", token])

        assert result.exit_code == 1
        assert "Provide --file or --essay-id" in result.output

    def test_tweak_saves_revision(self, cli_service, mock_client, token):
        essay = cli_service.create_essay(token, {"topic": "Deserts", "content": "Sand."})
        mock_client.complete.return_value = ok("Sand and sun.")

        result = runner.invoke(
            main.app,
            ["tweak", "--essay-id", essay.id, "--feedback", "Mention sun", "--save", "--token", token],
        )

        assert result.exit_code == 0, result.output
        stored = cli_service.get_essay(token, essay.id)
        assert stored.content == "Sand and sun."
        assert stored.word_count == 3

    def test_tweak_save_requires_essay_id(self, mock_client, token, tmp_path):
        essay_file = tmp_path / "essay.md"
        essay_file.write_text("Essay body", encoding="utf-8")

        result = runner.invoke(
            main.app,
            ["tweak", "--file", str(essay_file), "--feedback", "x", "--save", "--token", token],
        )

        assert result.exit_code == 1
        mock_client.complete.assert_not_called()

    def test_cite(self, mock_client, token):
        mock_client.complete.return_value = ok("Works Cited\nEntry.")

        result = runner.invoke(
            main.app,
            ["cite", "--citation", "https://a.example", "--style", "Chicago", "--token", token],
        )

        assert result.exit_code == 0, result.output
        assert "Works Cited" in result.stdout

    def test_cite_rejects_unknown_style(self, mock_client, token):
        result = runner.invoke(
            main.app,
            ["cite", "--citation", "https://a.example", "--style", "IEEE", "--token", token],
        )

        assert result.exit_code == 1
        mock_client.complete.assert_not_called()

    def test_cite_checks_style_before_reading_saved_essay(self, cli_service, mock_client):
        cli_service.container.store.get = MagicMock()

        result = runner.invoke(main.app, ["cite", "--essay-id", "c" * 32, "--style", "Harvard"])

        assert result.exit_code == 1
        assert "Unsupported citation style 'Harvard'" in result.output
        assert "Authentication required" not in result.output
        cli_service.container.store.get.assert_not_called()
        mock_client.complete.assert_not_called()


class TestEssaysCommands:
    def test_list_show_update_delete(self, cli_service, token, tmp_path):
        essay = cli_service.create_essay(token, {"topic": "Deserts", "content": "Sand."})

        listed = runner.invoke(main.app, ["essays", "list", "--token", token])
        assert listed.exit_code == 0
        assert essay.id in listed.stdout

        shown = runner.invoke(main.app, ["essays", "show", essay.id, "--token", token])
        assert "# Deserts" in shown.stdout

        updated = runner.invoke(main.app, ["essays", "update", essay.id, "--status", "complete", "--token", token])
        assert updated.exit_code == 0, updated.output
        assert "complete" in updated.stdout

        deleted = runner.invoke(main.app, ["essays", "delete", essay.id, "--token", token])
        assert deleted.exit_code == 0
        assert cli_service.list_essays(token) == []

    def test_create_from_file(self, cli_service, token, tmp_path):
        content = tmp_path / "mine.md"
        content.write_text("My own words here.", encoding="utf-8")

        result = runner.invoke(
            main.app,
            ["essays", "create", "--topic", "Mine", "--content-file", str(content), "--token", token],
        )

        assert result.exit_code == 0, result.output
        [essay] = cli_service.list_essays(token)
        assert essay.word_count == 4

    def test_show_other_users_essay(self, cli_service, token, other_token):
        essay = cli_service.create_essay(token, {"topic": "Deserts"})

        result = runner.invoke(main.app, ["essays", "show", essay.id, "--token", other_token])

        assert result.exit_code == 1
        assert "Essay not found" in result.output

    def test_empty_list(self, token):
        result = runner.invoke(main.app, ["essays", "list", "--token", token])

        assert "No essays yet." in result.stdout

    def test_show_unreadable_essay(self, cli_service, token):
        store = cli_service.container.store
        store.directory.mkdir(parents=True, exist_ok=True)
        essay_id = "b" * 32
        (store.directory / f"{essay_id}.json").write_text("{not json", encoding="utf-8")

        result = runner.invoke(main.app, ["essays", "show", essay_id, "--token", token])

        assert result.exit_code == 1
        assert "Unreadable essay file" in result.output
