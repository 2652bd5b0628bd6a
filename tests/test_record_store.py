import datetime
import threading

import pytest

from src.record_store import ThreadSafeRecordStore

DAY = datetime.timedelta(days=1)


@pytest.fixture
def store():
    return ThreadSafeRecordStore()


def test_duplicate_ids_raise(store, make_session, make_response):
    store.add_session(make_session("s1"))
    with pytest.raises(ValueError, match="already exists"):
        store.add_session(make_session("s1"))

    store.add_response(make_response(id="r1"))
    with pytest.raises(ValueError):
        store.add_response(make_response(id="r1"))


def test_fetch_responses_filters_and_orders(store, make_session, make_response):
    base = datetime.datetime(2025, 3, 1, tzinfo=datetime.timezone.utc)
    store.load(
        [make_session("s1", survey_id="a"), make_session("s2", survey_id="b")],
        [
            make_response("late", session_id="s1", theme_id="t1", created_at=base + 2 * DAY),
            make_response("early", session_id="s1", theme_id="t2", created_at=base),
            make_response("other survey", session_id="s2", theme_id="t1", created_at=base),
            make_response("orphan", session_id="missing", created_at=base),
        ],
    )

    assert [r.content for r in store.fetch_responses("a")] == ["early", "late"]
    assert [r.content for r in store.fetch_responses("a", theme_id="t1")] == ["late"]
    assert [r.content for r in store.fetch_responses(start=base + DAY)] == ["late"]
    assert len(store.fetch_responses(end=base)) == 3
    assert store.count() == 4


def test_fetch_sessions_newest_first(store, make_session):
    base = datetime.datetime(2025, 3, 1, tzinfo=datetime.timezone.utc)
    store.load(
        [
            make_session("old", started_at=base),
            make_session("new", started_at=base + 3 * DAY),
            make_session("elsewhere", survey_id="other", started_at=base),
        ],
        [],
    )

    assert [s.id for s in store.fetch_sessions("survey-1")] == ["new", "old"]
    assert [s.id for s in store.fetch_sessions(end=base + DAY)] == ["old", "elsewhere"]
    assert store.get_session("old").started_at == base
    assert store.get_session("nope") is None


def test_concurrent_adds(store, make_response):
    responses = [make_response(id=f"r{i}") for i in range(200)]

    def _add(chunk):
        for response in chunk:
            store.add_response(response)

    threads = [threading.Thread(target=_add, args=(responses[i::4],)) for i in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert store.count() == 200
