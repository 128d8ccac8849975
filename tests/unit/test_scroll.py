from __future__ import annotations

import pytest

from search_bridge.adapters.elasticsearch.response import ESResponseDecoder
from search_bridge.adapters.elasticsearch.scroll import ESScrollIterator
from search_bridge.errors import ScrollExhausted


def _hits(make_hit, prefix: str, count: int) -> list:
    return [make_hit(f"{prefix}{i}", mag=float(i)) for i in range(count)]


def _iterator(transport, make_reply, make_hit, initial: int, scroll_id: str | None = "s0") -> ESScrollIterator:
    result = ESResponseDecoder().decode(make_reply(_hits(make_hit, "i", initial), scroll_id=scroll_id))
    return ESScrollIterator(transport, result, keep_alive="2m")


def test_yields_initial_hits_then_every_batch(fake_transport, make_reply, make_hit) -> None:
    fake_transport.pages = [
        make_reply(_hits(make_hit, "a", 3), scroll_id="s1"),
        make_reply(_hits(make_hit, "b", 2), scroll_id="s2"),
        make_reply([], scroll_id="s3"),
    ]
    iterator = _iterator(fake_transport, make_reply, make_hit, initial=4)

    ids = [hit.id for hit in iterator]

    assert len(ids) == 4 + 3 + 2
    assert ids[:5] == ["i0", "i1", "i2", "i3", "a0"]
    assert fake_transport.continuations == [("2m", "s0"), ("2m", "s1"), ("2m", "s2")]
    assert iterator.scroll_id is None


def test_no_request_after_empty_batch(fake_transport, make_reply, make_hit) -> None:
    fake_transport.pages = [make_reply([], scroll_id="s1")]
    iterator = _iterator(fake_transport, make_reply, make_hit, initial=1)

    assert iterator.has_next()
    iterator.next_hit()
    assert not iterator.has_next()
    assert not iterator.has_next()

    assert len(fake_transport.continuations) == 1
    with pytest.raises(ScrollExhausted):
        iterator.next_hit()
    assert len(fake_transport.continuations) == 1


def test_has_next_is_idempotent_while_hits_are_queued(fake_transport, make_reply, make_hit) -> None:
    iterator = _iterator(fake_transport, make_reply, make_hit, initial=2)

    for _ in range(5):
        assert iterator.has_next()

    assert fake_transport.continuations == []


def test_fetches_only_when_queue_runs_dry(fake_transport, make_reply, make_hit) -> None:
    fake_transport.pages = [make_reply(_hits(make_hit, "a", 1), scroll_id="s1"), make_reply([])]
    iterator = _iterator(fake_transport, make_reply, make_hit, initial=2)

    iterator.next_hit()
    iterator.next_hit()
    assert fake_transport.continuations == []

    assert iterator.next_hit().id == "a0"
    assert len(fake_transport.continuations) == 1


def test_reply_without_cursor_never_continues(fake_transport, make_reply, make_hit) -> None:
    iterator = _iterator(fake_transport, make_reply, make_hit, initial=2, scroll_id=None)

    assert len(list(iterator)) == 2
    assert fake_transport.continuations == []


def test_empty_initial_reply_fetches_once(fake_transport, make_reply, make_hit) -> None:
    fake_transport.pages = [make_reply([], scroll_id="s1")]
    iterator = _iterator(fake_transport, make_reply, make_hit, initial=0)

    assert list(iterator) == []
    assert len(fake_transport.continuations) == 1


def test_exhaustion_is_a_stop_iteration(fake_transport, make_reply, make_hit) -> None:
    iterator = _iterator(fake_transport, make_reply, make_hit, initial=0, scroll_id=None)

    with pytest.raises(StopIteration):
        next(iterator)


def test_continuation_failure_propagates(make_reply, make_hit) -> None:
    class _FailingTransport:
        def continue_scroll(self, keep_alive: str, scroll_id: str):
            raise ConnectionError("engine unreachable")

    iterator = _iterator(_FailingTransport(), make_reply, make_hit, initial=0)

    with pytest.raises(ConnectionError, match="engine unreachable"):
        iterator.has_next()
    assert iterator.scroll_id == "s0"
