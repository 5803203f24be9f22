from __future__ import annotations

import dataclasses
from typing import Optional, TYPE_CHECKING


if TYPE_CHECKING:
    import sqlalchemy as sa
    from .pager.paginator import Paginator
    from .typing import SARow


@dataclasses.dataclass
class PagerSettings:
    """ Settings for Paginator

    This object defines additional behavior that may be used with pagination:
    limit result rows, customize queries, customize results
    """
    # The `limit` you get by default, if not specified
    default_limit: Optional[int] = 100

    # The max number of items you get, regardless of the limit
    max_limit: Optional[int] = None

    # ### Callbacks for Paginator
    # Paginator will use these methods to apply the settings

    def get_final_limit(self, limit: Optional[int]) -> int:
        """ Callback that fine-tunes the `limit` of a page by applying default and max limits

        Raises:
            ValueError: no limit given, and no default limit configured
        """
        # Apply default limit
        if not limit:
            limit = self.default_limit

        # Keyset pagination is impossible without a limit
        if not limit:
            raise ValueError('PagerSettings.default_limit must be set when pages have no explicit limit')

        # Apply max limit
        if self.max_limit:
            limit = min(limit, self.max_limit)

        # Done
        return limit

    def customize_statement(self, paginator: Paginator, stmt: sa.sql.Select) -> sa.sql.Select:
        """ Callback that customizes the statement

        Used by: Paginator, after the keyset predicate and ordering are applied, but before the LIMIT.

        Default behavior: none
        You can override this method for custom behavior
        """
        return stmt

    def customize_result(self, paginator: Paginator, rows: list[SARow]) -> list[SARow]:
        """ Callback that customizes fetched rows

        Used by: Paginator, right after rows are fetched: before the page is trimmed and cursors are made.
        Don't remove rows here: that would break the "has more" detection.

        Default behavior: none
        You can override this method for custom behavior
        """
        return rows
