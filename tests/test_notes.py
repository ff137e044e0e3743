"""Tests for saved notes and their storage backends."""
import json

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from doubtsolver.config import NOTES_STORAGE_KEY
from doubtsolver.errors import PersistenceParseError
from doubtsolver.notes import Note, NoteStore, create_note_store, decode_notes, encode_notes
from doubtsolver.notes.in_memory import InMemoryNoteStore
from doubtsolver.notes.json_file import JsonFileNoteStore
from doubtsolver.notes.sqlite import SQLiteNoteStore


class TestNoteModel:
    """Tests for the Note model and its persisted form."""

    def test_create_truncates_question(self):
        note = Note.create(1, "q" * 250, "a" * 5000)

        assert len(note.question) == 100
        assert len(note.answer) == 5000

    def test_decode_absent_record(self):
        assert decode_notes(None) == []
        assert decode_notes("   ") == []

    def test_decode_corrupt_record(self):
        with pytest.raises(PersistenceParseError):
            decode_notes("{not json")
        with pytest.raises(PersistenceParseError):
            decode_notes('{"id": 1}')

    def test_encode_decode(self):
        notes = [Note.create(2, "Second", "B"), Note.create(1, "First", "A")]

        assert decode_notes(encode_notes(notes)) == notes

    @given(st.text(max_size=400))
    @settings(max_examples=50)
    def test_question_preview_bound(self, question: str):
        """Property test: stored questions never exceed the preview length."""
        note = Note.create(1, question, "answer")
        assert len(note.question) <= 100
        assert question.startswith(note.question)


class TestNoteStore:
    """Tests for NoteStore behavior shared by every backend."""

    def test_store_is_abstract(self):
        with pytest.raises(TypeError):
            NoteStore()  # type: ignore

    @pytest.mark.asyncio
    async def test_save_truncates_and_prepends(self, memory_store):
        first = await memory_store.save("First question", "First answer")
        second = await memory_store.save("q" * 250, "Second answer")

        notes = await memory_store.load()

        assert [n.id for n in notes] == [second.id, first.id]
        assert len(notes[0].question) == 100
        assert notes[0].answer == "Second answer"

    @pytest.mark.asyncio
    async def test_ids_strictly_increase(self, memory_store):
        saved = [await memory_store.save(f"q{i}", f"a{i}") for i in range(5)]

        ids = [note.id for note in saved]
        assert ids == sorted(set(ids))

    @pytest.mark.asyncio
    async def test_get(self, memory_store):
        note = await memory_store.save("What is a diode?", "A diode is...")

        assert await memory_store.get(note.id) == note
        assert await memory_store.get(note.id + 1000) is None

    @pytest.mark.asyncio
    async def test_delete(self, memory_store):
        keep = await memory_store.save("Keep", "1")
        drop = await memory_store.save("Drop", "2")

        assert await memory_store.delete(drop.id) is True

        assert await memory_store.load() == [keep]

    @pytest.mark.asyncio
    async def test_delete_missing_id_writes_nothing(self):
        store = InMemoryNoteStore(initial={NOTES_STORAGE_KEY: "[]"})

        assert await store.delete(12345) is False
        assert store._records[NOTES_STORAGE_KEY] == "[]"

    @pytest.mark.asyncio
    async def test_load_save_all_is_idempotent(self, memory_store):
        await memory_store.save("A", "1")
        await memory_store.save("B", "2")

        loaded = await memory_store.load()
        await memory_store.save_all(loaded)

        assert await memory_store.load() == loaded

    @pytest.mark.asyncio
    async def test_load_sorts_newest_first(self):
        raw = encode_notes([Note.create(1, "old", "a"), Note.create(3, "new", "c")])
        store = InMemoryNoteStore(initial={NOTES_STORAGE_KEY: raw})

        assert [n.id for n in await store.load()] == [3, 1]

    @pytest.mark.asyncio
    async def test_corrupt_state_loads_empty(self):
        store = InMemoryNoteStore(initial={NOTES_STORAGE_KEY: "definitely not json"})

        assert await store.load() == []

    @pytest.mark.asyncio
    async def test_save_over_corrupt_state(self):
        store = InMemoryNoteStore(initial={NOTES_STORAGE_KEY: "[{\"broken\": true}]"})

        note = await store.save("Q", "A")

        assert await store.load() == [note]


class TestJsonFileNoteStore:
    """Tests for the JSON file backend."""

    @pytest.mark.asyncio
    async def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "data" / "storage.json"

        async with JsonFileNoteStore(path) as store:
            note = await store.save("What is Ohm's law?", "V = IR")

        async with JsonFileNoteStore(path) as reopened:
            assert await reopened.load() == [note]

    @pytest.mark.asyncio
    async def test_file_layout(self, tmp_path):
        path = tmp_path / "storage.json"

        async with JsonFileNoteStore(path) as store:
            await store.save("Q", "A")

        records = json.loads(path.read_text(encoding="utf-8"))
        assert list(records) == [NOTES_STORAGE_KEY]
        assert isinstance(records[NOTES_STORAGE_KEY], str)
        assert json.loads(records[NOTES_STORAGE_KEY])[0]["question"] == "Q"

    @pytest.mark.asyncio
    async def test_other_keys_are_preserved(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text(json.dumps({"theme": "dark"}), encoding="utf-8")

        async with JsonFileNoteStore(path) as store:
            await store.save("Q", "A")

        assert json.loads(path.read_text(encoding="utf-8"))["theme"] == "dark"

    @pytest.mark.asyncio
    async def test_corrupt_file_loads_empty_and_is_replaced(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("{{{", encoding="utf-8")

        async with JsonFileNoteStore(path) as store:
            assert await store.load() == []
            note = await store.save("Q", "A")
            assert await store.load() == [note]


class TestSQLiteNoteStore:
    """Tests for the SQLite backend."""

    @pytest.mark.asyncio
    async def test_persists_across_connections(self, tmp_path):
        db_path = tmp_path / "notes.db"

        async with SQLiteNoteStore(db_path) as store:
            first = await store.save("First", "1")
            second = await store.save("Second", "2")

        async with SQLiteNoteStore(db_path) as reopened:
            assert await reopened.load() == [second, first]
            assert await reopened.delete(first.id) is True
            assert await reopened.load() == [second]

    @pytest.mark.asyncio
    async def test_requires_connection(self, tmp_path):
        store = SQLiteNoteStore(tmp_path / "notes.db")

        with pytest.raises(RuntimeError, match="Not connected"):
            await store.save("Q", "A")

        await store.connect()
        await store.disconnect()
        with pytest.raises(RuntimeError, match="Not connected"):
            await store.load()


class TestNoteStoreFactory:
    """Tests for create_note_store."""

    def test_create_memory(self):
        store = create_note_store("memory")
        assert store.backend_type == "memory"
        assert store.key == NOTES_STORAGE_KEY

    def test_create_json(self, tmp_path):
        store = create_note_store("json", path=tmp_path / "s.json")
        assert isinstance(store, JsonFileNoteStore)
        assert store.path == tmp_path / "s.json"

    def test_create_sqlite(self, tmp_path):
        store = create_note_store("sqlite", path=tmp_path / "n.db")
        assert isinstance(store, SQLiteNoteStore)

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unsupported notes backend"):
            create_note_store("redis")
