"""Tests for the order status graph and role permissions."""

import pytest

from dinein.web.core.models import User
from dinein.web.restaurant.exceptions import Forbidden, IllegalTransition
from dinein.web.restaurant.models import OrderStatus
from dinein.web.restaurant.transitions import (
    TERMINAL_STATUSES,
    TRANSITIONS,
    can_perform,
    check_transition,
    is_legal,
)

S = OrderStatus
R = User.Role


class TestGraph:
    def test_every_status_has_an_entry(self):
        assert set(TRANSITIONS) == set(OrderStatus.values)

    def test_terminal_statuses(self):
        assert TERMINAL_STATUSES == {S.COMPLETED, S.CANCELLED}

    @pytest.mark.parametrize(
        ("current", "target"),
        [
            (S.PENDING, S.PAID),
            (S.PAID, S.PREPARING),
            (S.PREPARING, S.READY),
            (S.READY, S.COMPLETED),
            (S.PENDING, S.CANCELLED),
            (S.PAID, S.CANCELLED),
            (S.PREPARING, S.CANCELLED),
        ],
    )
    def test_legal_edges(self, current, target):
        assert is_legal(current, target)

    @pytest.mark.parametrize(
        ("current", "target"),
        [
            (S.PENDING, S.PREPARING),
            (S.PAID, S.READY),
            (S.READY, S.CANCELLED),
            (S.COMPLETED, S.PENDING),
            (S.CANCELLED, S.PAID),
            (S.READY, S.PREPARING),
            (S.READY, S.PENDING),
        ],
    )
    def test_illegal_edges(self, current, target):
        assert not is_legal(current, target)


class TestPermissions:
    def test_manager_may_do_anything_legal(self):
        assert can_perform(R.MANAGER, S.PENDING, S.PAID)
        assert can_perform(R.MANAGER, S.READY, S.COMPLETED)

    def test_kitchen_edges(self):
        assert can_perform(R.KITCHEN, S.PAID, S.PREPARING)
        assert can_perform(R.KITCHEN, S.PREPARING, S.READY)
        assert not can_perform(R.KITCHEN, S.READY, S.COMPLETED)
        assert not can_perform(R.KITCHEN, S.PAID, S.CANCELLED)

    def test_cashier_edges(self):
        assert can_perform(R.CASHIER, S.READY, S.COMPLETED)
        assert can_perform(R.CASHIER, S.PENDING, S.CANCELLED)
        assert can_perform(R.CASHIER, S.PREPARING, S.CANCELLED)
        assert not can_perform(R.CASHIER, S.PAID, S.PREPARING)
        assert not can_perform(R.CASHIER, S.PENDING, S.PAID)

    def test_no_role_may_do_nothing(self):
        assert not can_perform(None, S.PAID, S.PREPARING)


class TestCheckTransition:
    def test_allowed_change(self):
        assert check_transition(S.PAID, S.PREPARING, R.KITCHEN) is True

    def test_same_status_is_noop(self):
        assert check_transition(S.PREPARING, S.PREPARING, R.KITCHEN) is False

    def test_illegal_edge_raises(self):
        with pytest.raises(IllegalTransition) as exc_info:
            check_transition(S.COMPLETED, S.PREPARING, R.MANAGER)
        assert exc_info.value.current == S.COMPLETED
        assert exc_info.value.target == S.PREPARING

    def test_illegal_checked_before_role(self):
        # Kitchen may not cancel, but the edge itself is the first problem
        with pytest.raises(IllegalTransition):
            check_transition(S.READY, S.CANCELLED, R.KITCHEN)

    def test_forbidden_role(self):
        with pytest.raises(Forbidden):
            check_transition(S.READY, S.COMPLETED, R.KITCHEN)

    def test_customer_cannot_change_status(self):
        with pytest.raises(Forbidden):
            check_transition(S.PENDING, S.CANCELLED, None)

    def test_unknown_target(self):
        with pytest.raises(IllegalTransition):
            check_transition(S.PENDING, "refunded", R.MANAGER)
