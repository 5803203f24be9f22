""" Order resolution: which way to fetch, and how to compare against the cursor """

from __future__ import annotations

from enum import Enum
from typing import NamedTuple


class Order(Enum):
    """ Sorting direction """
    ASC = 'ASC'
    DESC = 'DESC'


class ResolvedOrder(NamedTuple):
    """ How to fetch a page """
    # Comparison operator for the keyset predicate: '>', '<', or '=' when there's no cursor (unused)
    operator: str

    # The order to fetch rows in.
    # Differs from the base order when going backwards
    effective_order: Order


def resolve_order(order: Order, *, has_after: bool, has_before: bool) -> ResolvedOrder:
    """ Get the comparison operator and the fetch order for the active cursor

    When going backwards, rows are fetched in the reverse order: this way, "N rows before the cursor" is a simple LIMIT.
    The rows are reversed back after they're fetched.

    The "after" cursor takes precedence when both are given.
    """
    if has_after:
        return ResolvedOrder('>' if order == Order.ASC else '<', order)
    elif has_before:
        return ResolvedOrder('<' if order == Order.ASC else '>', flip_order(order))
    else:
        return ResolvedOrder('=', order)


def flip_order(order: Order) -> Order:
    return Order.DESC if order == Order.ASC else Order.ASC
