""" Paginator: loads pages of rows using keyset pagination """

from __future__ import annotations

import logging
from collections import abc
from typing import Optional, Union

import sqlalchemy as sa
import sqlalchemy.orm
import sqlalchemy.ext.asyncio

from keysetpager.settings import PagerSettings
from keysetpager.typing import SAModel, SARow, SAConnectable, SAAsyncConnectable, SASubqueryLike
from keysetpager.sainfo.columns import resolve_column_by_name, resolve_key_types
from keysetpager.sainfo.models import mapped_column_names
from keysetpager.sainfo.names import default_alias

from .codec import CursorCodec, FieldType
from .order import resolve_order
from .page import PageRequest, PageResult, NextCursor
from .predicate import build_keyset_predicate, build_order_by, join_subquery


logger = logging.getLogger(__name__)


class Paginator:
    """ Keyset paginator: loads pages of a model's rows, gives cursors to the neighboring pages

    The paginator only holds configuration, which never changes.
    Everything about a particular page comes with a PageRequest.
    As a result, one paginator can serve many concurrent requests.

    Example:
        paginator = Paginator(models.Article)

        page = await paginator.paginate(connection, PageRequest(('ctime', 'id'), 'id', limit=20))
        page = await paginator.paginate(connection, PageRequest(('ctime', 'id'), 'id', limit=20, after_cursor=page.cursor.after))
    """
    # The model to paginate
    Model: SAModel

    # The SQL alias for the model: `Model AS alias`
    alias: str

    # The aliased model. Use it if you provide your own statement
    target_Model: sa.orm.util.AliasedClass

    # Types of pagination keys, given explicitly.
    # Other keys get their types from the model columns
    key_types: dict[str, FieldType]

    # Settings
    settings: PagerSettings

    def __init__(self, Model: SAModel, *, key_types: Optional[abc.Mapping[str, FieldType]] = None, alias: Optional[str] = None, settings: Optional[PagerSettings] = None):
        """ Prepare to paginate over a model

        Args:
            Model: The Model class to paginate
            key_types: Types of pagination keys, if you don't want them to be taken from the model
            alias: SQL alias for the model. Default: model name in snake_case
            settings: Pagination settings
        """
        self.Model = Model
        self.alias = alias or default_alias(Model)
        self.target_Model = sa.orm.aliased(Model, name=self.alias)
        self.key_types = dict(key_types or {})
        self.settings = settings or PagerSettings()

    __slots__ = 'Model', 'alias', 'target_Model', 'key_types', 'settings'

    def codec(self, pagination_keys: abc.Iterable[str]) -> CursorCodec:
        """ Get a codec for cursors over these keys

        Raises:
            exc.InvalidColumnError: a key is not a column
            exc.UnknownFieldTypeError: a key type cannot be resolved
        """
        return CursorCodec(resolve_key_types(self.target_Model, pagination_keys, self.key_types))

    def select_statement(self) -> sa.sql.Select:
        """ Default statement: select every column of the model """
        return sa.select(*(
            getattr(self.target_Model, name)
            for name in mapped_column_names(self.Model)
        ))

    def statement(self, request: PageRequest, stmt: Optional[sa.sql.Select] = None, subquery: Optional[SASubqueryLike] = None) -> sa.sql.Select:
        """ Get the SQL statement that loads the page

        Args:
            request: The page to load
            stmt: Your own statement to paginate. Select from `self.target_Model`; don't order it.
            subquery: Limit the rows to those that are found in this subquery (joined on the first pagination key)

        Raises:
            exc.CursorDecodeError: invalid cursor
            exc.InvalidColumnError: invalid pagination key
            exc.UnknownFieldTypeError: a key type cannot be resolved
        """
        limit = self.settings.get_final_limit(request.limit)
        return self._statement(request, limit, self.codec(request.pagination_keys), stmt, subquery)

    async def paginate(self, connection: SAAsyncConnectable, request: PageRequest, *, stmt: Optional[sa.sql.Select] = None, subquery: Optional[SASubqueryLike] = None) -> PageResult:
        """ Load a page: async version

        Args:
            connection: AsyncConnection or AsyncSession
            request: The page to load
            stmt: Your own statement to paginate. See statement()
            subquery: Limit the rows to those that are found in this subquery. See statement()

        Raises:
            exc.CursorDecodeError: invalid cursor
            exc.QueryExecutionError: whatever the database has to say
        """
        limit = self.settings.get_final_limit(request.limit)
        codec = self.codec(request.pagination_keys)
        stmt = self._statement(request, limit, codec, stmt, subquery)

        result = await connection.execute(stmt)
        rows = fetched_rows(connection, stmt, result)
        return self._assemble(request, limit, codec, rows)

    def fetchall(self, connection: SAConnectable, request: PageRequest, *, stmt: Optional[sa.sql.Select] = None, subquery: Optional[SASubqueryLike] = None) -> PageResult:
        """ Load a page: sync version

        Args:
            connection: Connection or Session
            request: The page to load
            stmt: Your own statement to paginate. See statement()
            subquery: Limit the rows to those that are found in this subquery. See statement()
        """
        limit = self.settings.get_final_limit(request.limit)
        codec = self.codec(request.pagination_keys)
        stmt = self._statement(request, limit, codec, stmt, subquery)

        result = connection.execute(stmt)
        rows = fetched_rows(connection, stmt, result)
        return self._assemble(request, limit, codec, rows)

    def _statement(self, request: PageRequest, limit: int, codec: CursorCodec, stmt: Optional[sa.sql.Select], subquery: Optional[SASubqueryLike]) -> sa.sql.Select:
        keys = request.pagination_keys
        columns = {
            key: resolve_column_by_name(key, self.target_Model, where='pagination keys')
            for key in keys
        }

        # Direction
        op, effective_order = resolve_order(request.order, has_after=request.has_after, has_before=request.has_before)
        logger.debug('Paginating %s by %s: order=%s, fetch order=%s, operator=%s',
                     self.alias, keys, request.order.value, effective_order.value, op)

        if stmt is None:
            stmt = self.select_statement()

        # Keyset predicate: only with a cursor
        cursor = request.active_cursor
        if cursor is not None:
            keyset = codec.decode(cursor, keys)
            stmt = stmt.where(build_keyset_predicate(columns, keyset, op, request.unique_key))

        # Restrict to the subquery
        if subquery is not None:
            stmt = join_subquery(stmt, columns[keys[0]], subquery, key=keys[0], alias=self.alias)

        # Ordering is always applied: pages are nondeterministic otherwise
        stmt = stmt.order_by(*build_order_by(columns.values(), effective_order))
        stmt = self.settings.customize_statement(self, stmt)

        # We will always load one more row to check if there's more
        return stmt.limit(limit + 1)

    def _assemble(self, request: PageRequest, limit: int, codec: CursorCodec, rows: list[SARow]) -> PageResult:
        rows = self.settings.customize_result(self, rows)
        page = assemble_page(rows, request, limit, codec)
        logger.debug('Paginated %s: fetched %d rows, returned %d, has more: %s', self.alias, len(rows), len(page.data), page.has_more)
        return page


def assemble_page(rows: list[SARow], request: PageRequest, limit: int, codec: CursorCodec) -> PageResult:
    """ Make a page from the fetched rows: trim, reverse, generate cursors

    Args:
        rows: rows fetched with `LIMIT limit + 1`, in the fetch order
        request: the page request
        limit: the final page limit
        codec: cursor codec
    """
    rows = list(rows)
    has_after = request.has_after
    has_before = request.has_before

    # Have more rows? We've loaded one extra row. Now remove it.
    has_more = len(rows) > limit
    if has_more:
        rows = rows[:limit]

    # Going backwards: rows were fetched in reverse
    if has_before and not has_after:
        rows.reverse()

    # No rows: no cursors
    if not rows:
        return PageResult(data=[], cursor=NextCursor(after=None, before=None), has_more=has_more)

    # Cursors to the neighboring pages
    keys = request.pagination_keys
    next_after = codec.encode(rows[-1], keys) if has_before or has_more else None
    next_before = codec.encode(rows[0], keys) if has_after or (has_more and has_before) else None

    # Done
    return PageResult(data=rows, cursor=NextCursor(after=next_after, before=next_before), has_more=has_more)


def fetched_rows(connection: Union[SAConnectable, SAAsyncConnectable], stmt: sa.sql.Select, result: sa.engine.Result) -> list[SARow]:
    """ Get rows from the result: ORM instances when a session loads an entity; dicts otherwise """
    if isinstance(connection, (sa.orm.Session, sa.ext.asyncio.AsyncSession)) and selects_single_entity(stmt):
        # Joined eager loads of collections repeat the entity: one instance per related row
        return list(result.unique().scalars().all())
    else:
        return [dict(row) for row in result.mappings().all()]


def selects_single_entity(stmt: sa.sql.Select) -> bool:
    """ Check: does the statement select one ORM entity? e.g. `select(User)` """
    descriptions = stmt.column_descriptions
    return (
        len(descriptions) == 1 and
        descriptions[0].get('entity') is not None and
        isinstance(descriptions[0].get('type'), type)
    )
