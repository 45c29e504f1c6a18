"""Tests for the owner-scoped JSON essay store."""

import time

import pytest

from essay_writer.errors import CorruptEssayError, EssayNotFoundError, InvalidRequestError
from essay_writer.state.state import EssayStatus
from essay_writer.storage.essay_store import JsonEssayStore


@pytest.fixture
def store(tmp_path):
    return JsonEssayStore(tmp_path / "essays")


class TestCreate:
    def test_defaults(self, store):
        essay = store.create("alice", {"topic": "  Volcanoes  "})

        assert essay.topic == "Volcanoes"
        assert essay.user == "alice"
        assert essay.status == EssayStatus.DRAFT
        assert essay.ai_model == "sonar"
        assert len(essay.id) == 32
        assert (store.directory / f"{essay.id}.json").exists()

    def test_directory_created_lazily(self, tmp_path):
        store = JsonEssayStore(tmp_path / "nested" / "essays")
        assert not store.directory.exists()

        store.create("alice", {"topic": "Volcanoes"})

        assert store.directory.exists()

    def test_topic_required(self, store):
        with pytest.raises(InvalidRequestError):
            store.create("alice", {"topic": "   "})

    def test_invalid_status(self, store):
        with pytest.raises(InvalidRequestError):
            store.create("alice", {"topic": "Volcanoes", "status": "published"})

    def test_unknown_field(self, store):
        with pytest.raises(InvalidRequestError):
            store.create("alice", {"topic": "Volcanoes", "user": "mallory"})


class TestOwnership:
    def test_owner_can_read(self, store):
        essay = store.create("alice", {"topic": "Volcanoes", "content": "Lava."})

        assert store.get(essay.id, "alice").content == "Lava."

    def test_other_user_cannot_read(self, store):
        essay = store.create("alice", {"topic": "Volcanoes"})

        with pytest.raises(EssayNotFoundError):
            store.get(essay.id, "bob")

    def test_other_user_cannot_update(self, store):
        essay = store.create("alice", {"topic": "Volcanoes"})

        with pytest.raises(EssayNotFoundError):
            store.update(essay.id, "bob", {"content": "Defaced"})
        assert store.get(essay.id, "alice").content == ""

    def test_other_user_cannot_delete(self, store):
        essay = store.create("alice", {"topic": "Volcanoes"})

        with pytest.raises(EssayNotFoundError):
            store.delete(essay.id, "bob")
        assert store.get(essay.id, "alice")

    def test_missing_essay(self, store):
        with pytest.raises(EssayNotFoundError):
            store.get("0" * 32, "alice")

    @pytest.mark.parametrize("essay_id", ["abc", "../../etc/passwd", "Z" * 32])
    def test_malformed_id(self, store, essay_id):
        with pytest.raises(InvalidRequestError):
            store.get(essay_id, "alice")


class TestUpdate:
    def test_only_provided_fields_change(self, store):
        essay = store.create("alice", {"topic": "Volcanoes", "thesis": "They shape land", "content": "Lava."})

        updated = store.update(essay.id, "alice", {"status": "complete"})

        assert updated.status == EssayStatus.COMPLETE
        assert updated.thesis == "They shape land"
        assert updated.content == "Lava."
        assert updated.created_at == essay.created_at
        assert updated.updated_at >= essay.updated_at

    def test_update_persists(self, store):
        essay = store.create("alice", {"topic": "Volcanoes"})
        store.update(essay.id, "alice", {"citations": ["https://a.example"]})

        assert store.get(essay.id, "alice").citations == ["https://a.example"]


class TestDeleteAndList:
    def test_delete(self, store):
        essay = store.create("alice", {"topic": "Volcanoes"})
        store.delete(essay.id, "alice")

        with pytest.raises(EssayNotFoundError):
            store.get(essay.id, "alice")

    def test_list_is_owner_scoped_newest_first(self, store):
        first = store.create("alice", {"topic": "First"})
        time.sleep(0.01)
        second = store.create("alice", {"topic": "Second"})
        store.create("bob", {"topic": "Bob's"})

        essays = store.list_by_owner("alice")

        assert [e.id for e in essays] == [second.id, first.id]

    def test_list_empty_before_first_write(self, store):
        assert store.list_by_owner("alice") == []


class TestUnreadableFiles:
    def test_list_skips_broken_json(self, store, capsys):
        essay = store.create("alice", {"topic": "Glaciers"})
        (store.directory / f"{'f' * 32}.json").write_text("{not json", encoding="utf-8")

        essays = store.list_by_owner("alice")

        assert [e.id for e in essays] == [essay.id]
        assert "Skipping" in capsys.readouterr().out

    def test_list_skips_file_failing_validation(self, store):
        essay = store.create("alice", {"topic": "Glaciers"})
        (store.directory / f"{'e' * 32}.json").write_text('{"id": "x"}', encoding="utf-8")

        assert [e.id for e in store.list_by_owner("alice")] == [essay.id]

    def test_get_broken_file_raises(self, store):
        store.directory.mkdir(parents=True)
        essay_id = "a" * 32
        (store.directory / f"{essay_id}.json").write_text("{not json", encoding="utf-8")

        with pytest.raises(CorruptEssayError) as exc_info:
            store.get(essay_id, "alice")

        assert essay_id in str(exc_info.value)
