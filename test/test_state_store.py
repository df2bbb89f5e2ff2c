import pytest

from template_forge.core.clock import ManualClock, SystemClock, day_of
from template_forge.core.event_log import EventLog
from template_forge.core.state_store import StateStore
from template_forge.models.contract_model import EventTopic, RateCounter


@pytest.fixture
def store() -> StateStore:
    return StateStore()


class TestStateStore:
    """Test suite for StateStore."""

    def test_get_default(self, store: StateStore) -> None:
        assert store.get(("missing",)) is None
        assert store.get(("missing",), 5) == 5
        assert ("missing",) not in store

    def test_set_and_update(self, store: StateStore) -> None:
        store.set("counter", 1)
        assert store.update("counter", lambda value: value + 1) == 2
        assert store.update("other", lambda value: value + 10, 0) == 10
        assert len(store) == 2

    def test_compare_and_update_returns_result(self, store: StateStore) -> None:
        result = store.compare_and_update("id", lambda current: (current, current + 1), 0)
        assert result == 0
        assert store.get("id") == 1

    def test_transaction_commits(self, store: StateStore) -> None:
        with store.transaction():
            store.set("a", 1)
        assert store.get("a") == 1
        assert store.depth == 0

    def test_transaction_rolls_back_on_error(self, store: StateStore) -> None:
        store.set("a", 1)
        with pytest.raises(RuntimeError):
            with store.transaction():
                store.set("a", 2)
                store.set("b", 3)
                raise RuntimeError("boom")

        assert store.get("a") == 1
        assert "b" not in store
        assert store.depth == 0

    def test_nested_rollback_keeps_outer_changes(self, store: StateStore) -> None:
        with store.transaction():
            store.set("outer", 1)
            with pytest.raises(ValueError):
                with store.transaction():
                    assert store.depth == 2
                    store.set("inner", 2)
                    store.set("outer", 99)
                    raise ValueError("inner failure")
            assert store.get("outer") == 1
            assert "inner" not in store

        assert store.get("outer") == 1

    def test_outer_rollback_discards_committed_inner(self, store: StateStore) -> None:
        with pytest.raises(KeyError):
            with store.transaction():
                with store.transaction():
                    store.set("inner", 1)
                raise KeyError("outer failure")
        assert "inner" not in store


class TestValueMapper:
    """Test suite for ValueMapper."""

    def test_default_and_is_empty(self, store: StateStore) -> None:
        mapper = store.mapper("rateCounter", "alice", default=RateCounter())
        assert mapper.is_empty()
        assert mapper.get() == RateCounter()

        mapper.set(RateCounter(count_today=1, last_reset_day=7))
        assert not mapper.is_empty()
        assert store.get(("rateCounter", "alice")).count_today == 1

    def test_update_and_compare_and_update(self, store: StateStore) -> None:
        mapper = store.mapper("uses", 1, default=0)
        assert mapper.update(lambda uses: uses + 1) == 1
        assert mapper.compare_and_update(lambda uses: (uses == 1, uses + 1)) is True
        assert mapper.get() == 2

    def test_records_are_immutable(self, store: StateStore) -> None:
        mapper = store.mapper("counter", default=RateCounter())
        mapper.set(RateCounter(count_today=1))
        with pytest.raises(Exception):
            mapper.get().count_today = 5
        assert mapper.get().count_today == 1


class TestEventLog:
    """Test suite for EventLog."""

    def test_emit_assigns_sequence(self) -> None:
        log = EventLog()
        first = log.emit(EventTopic.TEMPLATE_RATED, {"token_nonce": 1}, 5, block_timestamp=10)
        second = log.emit(EventTopic.FEES_WITHDRAWN)

        assert (first.sequence, second.sequence) == (0, 1)
        assert first.block_timestamp == 10
        assert second.fields == {}
        assert len(log) == 2

    def test_rollback_to_mark(self) -> None:
        log = EventLog()
        log.emit(EventTopic.TEMPLATE_RATED)
        mark = log.mark()
        log.emit(EventTopic.TEMPLATE_LISTED)
        log.emit(EventTopic.TEMPLATE_PURCHASED)

        log.rollback_to(mark)
        assert [event.topic for event in log.since()] == [EventTopic.TEMPLATE_RATED]

    def test_queries(self) -> None:
        log = EventLog()
        log.emit(EventTopic.TEMPLATE_LISTED, payload=1)
        log.emit(EventTopic.TEMPLATE_RATED)
        log.emit(EventTopic.TEMPLATE_LISTED, payload=2)

        assert [event.payload for event in log.by_topic(EventTopic.TEMPLATE_LISTED)] == [1, 2]
        assert log.last(EventTopic.TEMPLATE_LISTED).payload == 2
        assert log.last().topic == EventTopic.TEMPLATE_LISTED
        assert log.last(EventTopic.FEES_WITHDRAWN) is None
        assert len(log.since(1)) == 2


class TestClock:
    """Test suite for clocks."""

    def test_manual_clock(self) -> None:
        clock = ManualClock(100)
        assert clock.advance(50) == 150
        assert clock.advance_days(2) == 150 + 2 * 86_400
        with pytest.raises(ValueError):
            clock.set(-1)

    def test_system_clock(self) -> None:
        assert SystemClock().now() > 1_600_000_000

    def test_day_of(self) -> None:
        assert day_of(0) == 0
        assert day_of(86_399) == 0
        assert day_of(86_400) == 1
