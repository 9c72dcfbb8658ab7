# tests/test_paginator.py
"""Test continuation pagination"""

import threading
from unittest.mock import Mock

import pytest

from ytmweb.ytmusic.exceptions import ApiError, NetworkError, RequestCancelled
from ytmweb.ytmusic.paginator import ContinuationPaginator


def page(items, next_token=None):
    return {"items": items, "next": next_token}


def collect(paginator, initial, cancel_event=None):
    return paginator.collect(
        initial,
        lambda doc: doc["items"],
        lambda doc: doc["next"],
        lambda doc: doc["items"],
        lambda doc: doc["next"],
        cancel_event=cancel_event,
    )


def chained_executor(length):
    """Executor whose continuation n returns item n and token n+1, up to length pages"""
    executor = Mock()

    def execute(endpoint, body, cancel_event=None):
        index = int(body["continuation"])
        next_token = str(index + 1) if index + 1 < length else None
        return page([index], next_token)

    executor.execute.side_effect = execute
    return executor


class TestContinuationPaginator:
    """Test the continuation loop"""

    def test_no_token_means_single_page(self):
        executor = Mock()
        paginator = ContinuationPaginator(executor)

        assert collect(paginator, page(["a", "b"])) == ["a", "b"]
        executor.execute.assert_not_called()

    def test_follows_tokens_in_order(self):
        executor = chained_executor(4)
        paginator = ContinuationPaginator(executor)

        assert collect(paginator, page([0], "1")) == [0, 1, 2, 3]
        assert executor.execute.call_count == 3

    def test_request_carries_only_the_token(self):
        executor = chained_executor(2)
        collect(ContinuationPaginator(executor), page([0], "1"))

        endpoint, body = executor.execute.call_args.args
        assert endpoint == "browse"
        assert body == {"continuation": "1"}

    def test_stops_at_max_continuations(self):
        # a chain of 12 pages: 1 initial request + at most 10 continuations
        executor = chained_executor(12)
        paginator = ContinuationPaginator(executor, max_continuations=10)

        items = collect(paginator, page([0], "1"))
        assert executor.execute.call_count == 10
        assert items == list(range(11))

    def test_failure_keeps_earlier_pages(self):
        executor = Mock()
        executor.execute.side_effect = [
            page(["p1"], "t2"),
            page(["p2"], "t3"),
            ApiError(500),
        ]
        paginator = ContinuationPaginator(executor)

        assert collect(paginator, page(["initial"], "t1")) == ["initial", "p1", "p2"]
        assert executor.execute.call_count == 3

    def test_network_failure_ends_loop(self):
        executor = Mock()
        executor.execute.side_effect = NetworkError(OSError("reset"))

        assert collect(ContinuationPaginator(executor), page(["a"], "t1")) == ["a"]

    def test_unreadable_page_keeps_earlier_pages(self):
        executor = Mock()
        executor.execute.side_effect = [page(["p1"], "t2"), {"unexpected": True}]
        paginator = ContinuationPaginator(executor)

        assert collect(paginator, page(["initial"], "t1")) == ["initial", "p1"]
        assert executor.execute.call_count == 2

    def test_parser_value_error_ends_loop(self):
        executor = chained_executor(3)

        def parse_continuation(doc):
            raise ValueError("invalid literal for int()")

        items = ContinuationPaginator(executor).collect(
            page(["initial"], "1"),
            lambda doc: doc["items"],
            lambda doc: doc["next"],
            parse_continuation,
            lambda doc: doc["next"],
        )
        assert items == ["initial"]
        assert executor.execute.call_count == 1

    def test_cancelled_before_continuation(self):
        executor = Mock()
        cancel = threading.Event()
        cancel.set()

        with pytest.raises(RequestCancelled):
            collect(ContinuationPaginator(executor), page(["a"], "t1"), cancel)
        executor.execute.assert_not_called()

    def test_cancellation_from_executor_propagates(self):
        executor = Mock()
        executor.execute.side_effect = RequestCancelled()

        with pytest.raises(RequestCancelled):
            collect(ContinuationPaginator(executor), page(["a"], "t1"), threading.Event())

    def test_cancel_during_fetch_drops_page(self):
        cancel = threading.Event()
        executor = Mock()

        def execute(endpoint, body, cancel_event=None):
            cancel.set()
            return page(["late"], None)

        executor.execute.side_effect = execute
        parse_continuation = Mock(return_value=["late"])

        with pytest.raises(RequestCancelled):
            ContinuationPaginator(executor).collect(
                page(["a"], "t1"),
                lambda doc: doc["items"],
                lambda doc: doc["next"],
                parse_continuation,
                lambda doc: doc["next"],
                cancel_event=cancel,
            )

    def test_custom_endpoint(self):
        executor = chained_executor(2)
        collect(ContinuationPaginator(executor, endpoint="next"), page([0], "1"))
        assert executor.execute.call_args.args[0] == "next"
