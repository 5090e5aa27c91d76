"""Test listener queue mutation and read accessors."""

from collections import OrderedDict
from unittest.mock import MagicMock

import pytest

from mediator.core.errors import InvalidInputKindError, InvalidListenerKindError, MediatorError
from mediator.events import Deferred
from mediator.notifier import EventMediator


def make_mediator(**kwargs):
    """Create a mediator with a mock instantiator and delta notifications off."""
    kwargs.setdefault("delta_notifications", False)
    return EventMediator(MagicMock(), **kwargs)


def listener_a():
    return "a"


def listener_b():
    return "b"


def listener_c():
    return "c"


class TestPush:
    """Test appending listeners."""

    def test_push_appends_and_returns_length(self):
        # Arrange
        mediator = make_mediator()
        mediator.push("evt", listener_a)
        mediator.push("evt", listener_b)

        # Act
        size = mediator.push("evt", listener_c)

        # Assert
        assert size == 3
        assert mediator.all("evt") == [listener_a, listener_b, listener_c]

    def test_push_string_is_stored_deferred(self):
        mediator = make_mediator()
        mediator.push("evt", "tests.listeners:RecordingListener")
        assert mediator.first("evt") == Deferred("tests.listeners:RecordingListener")

    def test_push_deferred_is_stored_as_is(self):
        mediator = make_mediator()
        deferred = Deferred("tests.listeners.RecordingListener")
        mediator.push("evt", deferred)
        assert mediator.first("evt") is deferred

    def test_push_list_fans_out_in_order(self):
        mediator = make_mediator()
        size = mediator.push("evt", [listener_a, "some.module:Listener", listener_b])
        assert size == 3
        assert mediator.all("evt") == [listener_a, Deferred("some.module:Listener"), listener_b]

    def test_push_nested_lists_are_flattened(self):
        mediator = make_mediator()
        mediator.push("evt", [listener_a, (listener_b, [listener_c])])
        assert mediator.all("evt") == [listener_a, listener_b, listener_c]

    def test_push_empty_list_creates_nothing(self):
        mediator = make_mediator()
        assert mediator.push("evt", []) == 0
        assert mediator.keys() == []

    def test_push_callable_object(self):
        class Handler:
            def __call__(self):
                return None

        mediator = make_mediator()
        handler = Handler()
        mediator.push("evt", handler)
        assert mediator.last("evt") is handler

    @pytest.mark.parametrize("bad", [42, None, 3.5, {"a": listener_a}, object()])
    def test_push_rejects_non_listeners(self, bad):
        mediator = make_mediator()
        with pytest.raises(InvalidListenerKindError) as exc_info:
            mediator.push("evt", bad)
        assert exc_info.value.code == "invalid_listener_kind"
        assert mediator.count("evt") == 0

    def test_invalid_listener_kind_is_type_error(self):
        mediator = make_mediator()
        with pytest.raises(TypeError):
            mediator.push("evt", 1)

    def test_push_list_with_bad_element_keeps_earlier_elements(self):
        mediator = make_mediator()
        with pytest.raises(InvalidListenerKindError):
            mediator.push("evt", [listener_a, 7, listener_b])
        assert mediator.all("evt") == [listener_a]


class TestPushAll:
    """Test bulk registration."""

    def test_push_all_from_mapping(self):
        mediator = make_mediator()
        mediator.push_all({"one": listener_a, "two": [listener_b, listener_c]})
        assert mediator.all("one") == [listener_a]
        assert mediator.all("two") == [listener_b, listener_c]

    def test_push_all_preserves_mapping_order(self):
        mediator = make_mediator()
        mediator.push_all(OrderedDict([("z", listener_a), ("a", listener_b)]))
        assert mediator.keys() == ["z", "a"]

    def test_push_all_from_pairs(self):
        mediator = make_mediator()
        mediator.push_all([("evt", listener_a), ("evt", listener_b)])
        assert mediator.all("evt") == [listener_a, listener_b]

    def test_push_all_from_generator(self):
        mediator = make_mediator()
        mediator.push_all((name, listener_a) for name in ("x", "y"))
        assert mediator.count("x") == mediator.count("y") == 1

    @pytest.mark.parametrize("bad", [None, 5, "evt", b"evt", listener_a])
    def test_push_all_rejects_non_iterables_and_strings(self, bad):
        mediator = make_mediator()
        with pytest.raises(InvalidInputKindError):
            mediator.push_all(bad)

    def test_push_all_rejects_non_pair_items(self):
        mediator = make_mediator()
        with pytest.raises(InvalidInputKindError) as exc_info:
            mediator.push_all([("evt", listener_a), "oops"])
        assert exc_info.value.details["index"] == 1
        assert mediator.count("evt") == 0

    def test_push_all_propagates_listener_errors(self):
        mediator = make_mediator()
        with pytest.raises(InvalidListenerKindError):
            mediator.push_all({"evt": 3})

    def test_errors_share_base_class(self):
        mediator = make_mediator()
        with pytest.raises(MediatorError):
            mediator.push_all(None)


class TestUnshift:
    """Test prepending listeners."""

    def test_unshift_prepends_and_returns_length(self):
        mediator = make_mediator()
        mediator.push("evt", [listener_a, listener_b])
        assert mediator.unshift("evt", listener_c) == 3
        assert mediator.all("evt") == [listener_c, listener_a, listener_b]

    def test_unshift_creates_queue(self):
        mediator = make_mediator()
        assert mediator.unshift("evt", "pkg.mod:Thing") == 1
        assert mediator.keys() == ["evt"]

    def test_unshift_does_not_expand_lists(self):
        mediator = make_mediator()
        with pytest.raises(InvalidListenerKindError):
            mediator.unshift("evt", [listener_a])
        assert mediator.count("evt") == 0


class TestShiftPop:
    """Test removing listeners from either end."""

    def test_shift_returns_front(self):
        mediator = make_mediator()
        mediator.push("evt", [listener_a, listener_b])
        assert mediator.shift("evt") is listener_a
        assert mediator.all("evt") == [listener_b]

    def test_pop_returns_back(self):
        mediator = make_mediator()
        mediator.push("evt", [listener_a, listener_b])
        assert mediator.pop("evt") is listener_b
        assert mediator.all("evt") == [listener_a]

    def test_shift_absent_returns_none(self):
        mediator = make_mediator()
        assert mediator.shift("evt") is None
        assert mediator.count("evt") == 0
        assert mediator.keys() == []

    def test_pop_absent_returns_none(self):
        mediator = make_mediator()
        assert mediator.pop("evt") is None
        assert mediator.keys() == []

    def test_draining_queue_removes_key(self):
        mediator = make_mediator()
        mediator.push("evt", listener_a)
        mediator.pop("evt")
        assert mediator.keys() == []
        assert mediator.shift("evt") is None


class TestClear:
    def test_clear_matches_never_registered(self):
        mediator = make_mediator()
        mediator.push("evt", [listener_a, listener_b])
        mediator.clear("evt")
        assert mediator.count("evt") == 0
        assert mediator.all("evt") == []
        assert mediator.first("evt") is None
        assert mediator.last("evt") is None
        assert "evt" not in mediator.keys()

    def test_clear_absent_is_safe(self):
        mediator = make_mediator()
        mediator.clear("never")  # should not raise
        assert mediator.count("never") == 0


class TestReadAccessors:
    """Test read-only accessors."""

    def test_untouched_event_reads_empty(self):
        mediator = make_mediator()
        assert mediator.all("evt") == []
        assert mediator.count("evt") == 0
        assert mediator.first("evt") is None
        assert mediator.last("evt") is None
        assert mediator.count_invocations("evt") == 0
        assert mediator.count_notifications("evt") == 0
        assert mediator.get_last_queue_delta() is None

    def test_first_and_last(self):
        mediator = make_mediator()
        mediator.push("evt", [listener_a, listener_b, listener_c])
        assert mediator.first("evt") is listener_a
        assert mediator.last("evt") is listener_c

    def test_last_single_entry(self):
        mediator = make_mediator()
        mediator.push("evt", listener_a)
        assert mediator.last("evt") is listener_a

    def test_all_returns_copy(self):
        mediator = make_mediator()
        mediator.push("evt", listener_a)
        snapshot = mediator.all("evt")
        snapshot.append(listener_b)
        assert mediator.all("evt") == [listener_a]

    def test_keys_lists_registered_events(self):
        mediator = make_mediator()
        mediator.push("one", listener_a)
        mediator.unshift("two", listener_b)
        assert mediator.keys() == ["one", "two"]

    def test_reads_do_not_record_delta(self):
        mediator = make_mediator()
        mediator.push("evt", listener_a)
        mediator.all("evt")
        mediator.first("other")
        mediator.count("other")
        mediator.keys()
        assert mediator.get_last_queue_delta() == ("evt", "push")

    def test_repeated_reads_are_identical(self):
        mediator = make_mediator()
        mediator.push_all({"a": [listener_a, listener_b], "b": "x.y:Z"})
        assert mediator.all("a") == mediator.all("a")
        assert mediator.count("b") == mediator.count("b")
        assert mediator.keys() == mediator.keys()
