import pytest
from datetime import datetime

from spectapps.models.video import VideoHistory
from spectapps.services.history import HistoryRecord, InMemoryHistoryStore, SQLHistoryStore
from tests.factories import BASE_TIME, VideoHistoryFactory


def add_rows(session_factory, rows):
    db = session_factory()
    try:
        db.add_all(rows)
        db.commit()
    finally:
        db.close()


class TestSQLHistoryStore:

    @pytest.mark.integration
    def test_append_persists_row(self, history_store, db_session_factory):
        record = history_store.append("a cat walking", "https://x/v.mp4")

        assert isinstance(record, HistoryRecord)
        assert record.id is not None
        assert record.prompt == "a cat walking"
        assert record.result_url == "https://x/v.mp4"
        assert isinstance(record.created_at, datetime)

        db = db_session_factory()
        try:
            rows = db.query(VideoHistory).all()
        finally:
            db.close()
        assert len(rows) == 1
        assert rows[0].video_url == "https://x/v.mp4"

    @pytest.mark.integration
    def test_list_recent_newest_first(self, history_store, db_session_factory):
        rows = VideoHistoryFactory.build_batch(3)
        prompts = [row.prompt for row in rows]
        add_rows(db_session_factory, rows)

        records = history_store.list_recent()

        assert [r.prompt for r in records] == list(reversed(prompts))

    @pytest.mark.integration
    def test_list_recent_respects_limit(self, history_store, db_session_factory):
        add_rows(db_session_factory, VideoHistoryFactory.build_batch(12))

        assert len(history_store.list_recent()) == 10
        assert len(history_store.list_recent(limit=3)) == 3

    @pytest.mark.integration
    def test_same_timestamp_ordered_by_id(self, history_store, db_session_factory):
        rows = VideoHistoryFactory.build_batch(2, created_at=BASE_TIME)
        second_prompt = rows[1].prompt
        add_rows(db_session_factory, rows)

        records = history_store.list_recent()

        assert records[0].id > records[1].id
        assert records[0].prompt == second_prompt

    @pytest.mark.integration
    def test_empty_history(self, history_store):
        assert history_store.list_recent() == []

    @pytest.mark.integration
    def test_failed_commit_is_rolled_back(self, db_session_factory, mocker):
        session = db_session_factory()
        mocker.patch.object(session, "commit", side_effect=RuntimeError("disk full"))
        rollback = mocker.spy(session, "rollback")
        store = SQLHistoryStore(lambda: session)

        with pytest.raises(RuntimeError):
            store.append("a cat", "https://x/v.mp4")

        rollback.assert_called_once()


class TestInMemoryHistoryStore:

    @pytest.mark.unit
    def test_append_and_list(self):
        store = InMemoryHistoryStore()
        store.append("one", "https://x/1.mp4")
        store.append("two", "https://x/2.mp4")
        store.append("three", "https://x/3.mp4")

        records = store.list_recent(limit=2)

        assert [r.prompt for r in records] == ["three", "two"]
        assert [r.id for r in records] == [3, 2]

    @pytest.mark.unit
    def test_record_to_dict(self):
        record = InMemoryHistoryStore().append("one", "https://x/1.mp4")

        data = record.to_dict()

        assert data["prompt"] == "one"
        assert data["result_url"] == "https://x/1.mp4"
        assert datetime.fromisoformat(data["created_at"]) == record.created_at
