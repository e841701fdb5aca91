"""Tests for the order board publish/subscribe behaviour."""

from shopdesk.application.order_board import OrderBoard
from shopdesk.domain.model.snapshot import OrderSnapshot
from tests.fakes import make_order


class TestOrderBoard:

    def test_replace_sets_seen_ids_and_clears_error(self):
        board = OrderBoard()
        board.report_error("offline")

        board.replace(OrderSnapshot.of([make_order("A"), make_order("B", "Confirmed")]))

        assert board.seen_ids == {"A", "B"}
        assert board.error is None

    def test_apply_leaves_seen_ids(self):
        board = OrderBoard()
        board.replace(OrderSnapshot.of([make_order("A")]))

        board.apply(OrderSnapshot.of([make_order("A"), make_order("B")]))

        assert board.seen_ids == {"A"}
        assert board.snapshot.ids == {"A", "B"}

    def test_failing_listener_does_not_block_others(self):
        board = OrderBoard()
        seen = []

        def broken(_):
            raise RuntimeError("render failed")

        board.subscribe(broken)
        board.subscribe(lambda b: seen.append(len(b.snapshot)))

        board.replace(OrderSnapshot.of([make_order("A")]))

        assert seen == [1]

    def test_unsubscribe(self):
        board = OrderBoard()
        calls = []
        unsubscribe = board.subscribe(lambda b: calls.append(1))

        board.report_error("x")
        unsubscribe()
        board.report_error("y")

        assert calls == [1]

    def test_reauthentication_flag(self):
        board = OrderBoard()
        board.require_reauthentication("expired")

        assert board.reauth_required
        assert board.error == "expired"

    def test_successful_sync_clears_reauthentication(self):
        board = OrderBoard()
        board.require_reauthentication("expired")

        board.replace(OrderSnapshot())

        assert not board.reauth_required
        assert board.error is None
