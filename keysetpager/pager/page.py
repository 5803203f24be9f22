from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, NamedTuple

from keysetpager import exc
from keysetpager.typing import SARow

from .order import Order


@dataclass(frozen=True)
class PageRequest:
    """ Page request: which page to fetch

    Make a new one for every page you load. Cursors come from the previous PageResult.

    Example:
        PageRequest(('ctime', 'id'), 'id', after_cursor=page.cursor.after, limit=20)
    """
    # Keys to paginate by.
    # Rows are sorted by these columns; cursors contain their values
    pagination_keys: tuple[str, ...]

    # The pagination key that is unique across all rows
    unique_key: str

    # Resume strictly after this position
    after_cursor: Optional[str] = None

    # Resume strictly before this position.
    # Ignored if `after_cursor` is given
    before_cursor: Optional[str] = None

    # How many rows to give per page. `None` uses the default limit
    limit: Optional[int] = None

    # The order of rows on the page
    order: Order = Order.DESC

    def __post_init__(self):
        # Keys can be given as any sequence: normalize
        object.__setattr__(self, 'pagination_keys', tuple(self.pagination_keys))
        try:
            object.__setattr__(self, 'order', Order(self.order))
        except ValueError as e:
            raise exc.PageRequestError(f'"order" must be one of {[o.value for o in Order]}, got {self.order!r}') from e

        if not self.pagination_keys:
            raise exc.PageRequestError('"pagination_keys" must not be empty')
        if len(set(self.pagination_keys)) != len(self.pagination_keys):
            raise exc.PageRequestError(f'"pagination_keys" has duplicates: {list(self.pagination_keys)}')
        if self.unique_key not in self.pagination_keys:
            raise exc.PageRequestError(f'"unique_key"={self.unique_key!r} must be one of the pagination keys')
        if self.limit is not None and (not isinstance(self.limit, int) or isinstance(self.limit, bool) or self.limit <= 0):
            raise exc.PageRequestError(f'"limit" must be a positive integer, got {self.limit!r}')

    @property
    def has_after(self) -> bool:
        return self.after_cursor is not None

    @property
    def has_before(self) -> bool:
        return self.before_cursor is not None

    @property
    def active_cursor(self) -> Optional[str]:
        """ The cursor to resume from: "after" has priority """
        return self.after_cursor if self.has_after else self.before_cursor


class NextCursor(NamedTuple):
    """ Cursors to the neighboring pages """
    # Cursor for the next page, if available. Feed it to `after_cursor`
    after: Optional[str]

    # Cursor for the previous page, if available. Feed it to `before_cursor`
    before: Optional[str]


@dataclass(frozen=True)
class PageResult:
    """ A page of rows """
    # Rows, in the order of the page
    data: list[SARow]

    # Cursors to the neighboring pages
    cursor: NextCursor

    # Were there more rows beyond the page, in the direction we've been fetching?
    has_more: bool = False
