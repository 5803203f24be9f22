import sqlalchemy as sa


class BaseKeysetPagerException(Exception):
    pass


class PageRequestError(BaseKeysetPagerException):
    """ Invalid input provided by the User

    Reported when there's something wrong with the page request
    """

    def __init__(self, err: str):
        super().__init__(f'Page request error: {err}')


class CursorDecodeError(PageRequestError):
    """ The cursor cannot be decoded

    Reported when the cursor string is not something we have produced: tampered, truncated, or foreign.
    The original low-level error is available as `__cause__`
    """

    def __init__(self, err: str):
        BaseKeysetPagerException.__init__(self, f'Invalid cursor: {err}')


class CursorEncodeError(BaseKeysetPagerException):
    """ A row value cannot be put into a cursor

    Reported when a pagination key has a value that its type cannot serialize (e.g. NULL)
    """

    def __init__(self, key: str, value: object):
        self.key = key
        self.value = value

        super().__init__(f'Cannot encode value {value!r} of pagination key "{key}" into a cursor')


class UnknownFieldTypeError(BaseKeysetPagerException):
    """ Pagination key type cannot be resolved

    Reported when a pagination key has no type in the key types mapping and the column type is unsupported.
    This is a programming error.
    """

    def __init__(self, model: str, key: str, type: object = None):
        self.model = model
        self.key = key
        self.type = type

        super().__init__(f'Cannot resolve the type of pagination key "{key}" for "{model}"' + (f': unsupported column type {type!r}' if type is not None else ''))


class InvalidColumnError(BaseKeysetPagerException):
    """ Pagination key names an invalid column

    Reported when a column mentioned by name is not found on the SqlAlchemy model, or on a subquery
    """

    def __init__(self, model: str, column_name: str, where: str):
        self.model = model
        self.column_name = column_name
        self.where = where

        super().__init__(f'Invalid column "{column_name}" for "{model}" specified in {where}')


# Errors reported by the query executor.
# They are propagated as they are: no wrapping, no retries
QueryExecutionError = sa.exc.SQLAlchemyError
