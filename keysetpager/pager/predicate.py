""" Keyset predicate: SQL expressions that select rows beyond the cursor """

from __future__ import annotations

import operator
from collections import abc
from typing import Any, Optional

import sqlalchemy as sa

from keysetpager import exc
from keysetpager.typing import SASubqueryLike

from .order import Order


# Alias for the joined subquery
SUBQUERY_ALIAS = 'filtered_entities'


def build_keyset_predicate(columns: abc.Mapping[str, sa.sql.ColumnElement], keyset: abc.Mapping[str, Any], op: str, unique_key: Optional[str]) -> sa.sql.ColumnElement:
    """ Build a predicate for rows past the cursor

    For every key, it's:

        (key OP value OR key = value)

    and the conditions for every key are AND-ed together.
    The unique key gets no equality condition: there can't be another row with the same value.

    NOTE: this is a per-column approximation of a tuple comparison. With up to two keys, with the unique key last,
    it selects the same rows. With more keys it may skip some rows. Existing cursors rely on this behavior.

    Args:
        columns: { key => column expression }
        keyset: decoded cursor: { key => value }
        op: comparison operator: '>' or '<'
        unique_key: name of the unique key
    """
    compare = {'>': operator.gt, '<': operator.lt}[op]

    conditions = []
    for key, value in keyset.items():
        column = columns[key]
        if key == unique_key:
            conditions.append(compare(column, value))
        else:
            conditions.append(sa.or_(compare(column, value), column == value))

    return sa.and_(*conditions)


def build_order_by(columns: abc.Iterable[sa.sql.ColumnElement], order: Order) -> list[sa.sql.ColumnElement]:
    """ Get the list of expressions to sort by """
    if order == Order.DESC:
        return [column.desc() for column in columns]
    else:
        return [column.asc() for column in columns]


def join_subquery(stmt: sa.sql.Select, column: sa.sql.ColumnElement, subquery: SASubqueryLike, *, key: str, alias: str) -> sa.sql.Select:
    """ Restrict the statement to a pre-filtered subset: INNER JOIN the subquery on the first pagination key

    The subquery can be:

    * A Select statement
    * A Subquery (e.g. `select(...).subquery()`)
    * A textual statement: `sa.text('SELECT id FROM ... WHERE user_id = :user_id').bindparams(user_id=1)`.
      Its bound parameters remain bound: nothing is inlined into the SQL text.

    The subquery should provide a column named either `<key>` or `<alias>_<key>`.

    Raises:
        exc.InvalidColumnError: the subquery has no column to join on
    """
    # Convert into a FROM-able object
    if isinstance(subquery, sa.sql.expression.TextClause):
        subquery = subquery.columns(sa.column(key)).subquery(SUBQUERY_ALIAS)
    elif isinstance(subquery, (sa.sql.expression.Select, sa.sql.expression.TextualSelect)):
        subquery = subquery.subquery(SUBQUERY_ALIAS)

    # Find the column to join on
    for name in (key, f'{alias}_{key}'):
        if name in subquery.c:
            join_column = subquery.c[name]
            break
    else:
        raise exc.InvalidColumnError(SUBQUERY_ALIAS, f'{alias}_{key}', where='subquery')

    return stmt.join(subquery, join_column == column)
