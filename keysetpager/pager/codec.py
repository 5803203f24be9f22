""" Cursor codec: the opaque cursor wire format

A cursor addresses the position of a single row. It is a base64-encoded string of comma-separated `key:value` pairs,
one pair per pagination key, in the order of pagination keys:

    ctime:2021-01-01T10:00:00,id:10  =>  Y3RpbWU6MjAyMS0wMS0wMVQxMDowMDowMCxpZDoxMA==

Values are serialized according to their types:

* number: decimal text
* boolean: "true" or "false"
* timestamp: ISO-8601
* text: as is, unescaped

The format is a public contract: cursors given out yesterday must keep working today.

NOTE: a text value that contains a comma corrupts the cursor: it will fail to decode.
The format is left as it is for the sake of compatibility with existing cursors; don't use such columns as pagination keys.
A colon is fine, though: every pair is split on the first colon only.
"""

from __future__ import annotations

import base64
import binascii
import logging
import math
from collections import abc
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional

from keysetpager import exc


logger = logging.getLogger(__name__)


class FieldType(Enum):
    """ Value type of a pagination key """
    TEXT = 'text'
    NUMBER = 'number'
    BOOLEAN = 'boolean'
    TIMESTAMP = 'timestamp'


class CursorCodec:
    """ Encode rows into cursors; decode cursors into keysets

    Example:
        codec = CursorCodec({'ctime': FieldType.TIMESTAMP, 'id': FieldType.NUMBER})
        cursor = codec.encode(row, ('ctime', 'id'))
        codec.decode(cursor)  #-> {'ctime': datetime(...), 'id': 10}
    """
    # Value types of all keys this codec can handle
    key_types: abc.Mapping[str, FieldType]

    def __init__(self, key_types: abc.Mapping[str, FieldType]):
        self.key_types = {key: FieldType(type) for key, type in key_types.items()}

    __slots__ = 'key_types',

    def encode(self, record: Any, pagination_keys: abc.Sequence[str]) -> str:
        """ Encode a record's position as an opaque cursor

        Args:
            record: a dict row, or an object (e.g. an ORM instance)
            pagination_keys: keys to take the values of

        Raises:
            exc.CursorEncodeError: a value can't be serialized
            exc.InvalidColumnError: the record has no such key
        """
        payload = ','.join(
            f'{key}:{encode_value(self.key_types[key], key, get_record_value(record, key))}'
            for key in pagination_keys
        )
        return base64.b64encode(payload.encode()).decode()

    def decode(self, cursor: str, pagination_keys: Optional[abc.Sequence[str]] = None) -> dict[str, Any]:
        """ Decode an opaque cursor into a keyset: { key => value }

        Args:
            cursor: the cursor string
            pagination_keys: if given, the cursor must contain exactly these keys

        Raises:
            exc.CursorDecodeError: malformed, tampered, or foreign cursor
        """
        try:
            return self._decode(cursor, pagination_keys)
        except exc.CursorDecodeError as e:
            logger.debug('Cursor %r rejected: %s', cursor, e)
            raise

    def _decode(self, cursor: str, pagination_keys: Optional[abc.Sequence[str]]) -> dict[str, Any]:
        try:
            payload = base64.b64decode(cursor, validate=True).decode()
        except (binascii.Error, ValueError) as e:  # UnicodeDecodeError is a ValueError
            raise exc.CursorDecodeError('not a valid base64 string') from e

        keyset: dict[str, Any] = {}
        for segment in payload.split(','):
            # Split on the first colon: values may contain colons
            key, sep, raw = segment.partition(':')
            if not sep:
                raise exc.CursorDecodeError(f'malformed segment {segment!r}')
            if key in keyset:
                raise exc.CursorDecodeError(f'duplicate key {key!r}')

            # Type
            try:
                type = self.key_types[key]
            except KeyError as e:
                raise exc.CursorDecodeError(f'unknown key {key!r}') from e

            # Value
            try:
                keyset[key] = decode_value(type, raw)
            except ValueError as e:
                raise exc.CursorDecodeError(f'invalid {type.value} value for key {key!r}: {e}') from e

        # Make sure the cursor was made for these very keys
        if pagination_keys is not None and tuple(keyset) != tuple(pagination_keys):
            raise exc.CursorDecodeError(f'expected keys {list(pagination_keys)}, got {list(keyset)}')

        return keyset


def encode_value(type: FieldType, key: str, value: Any) -> str:
    """ Serialize a value into its canonical text form

    Raises:
        exc.CursorEncodeError
    """
    if type == FieldType.NUMBER and isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        # inf and nan have no place in a keyset
        if isinstance(value, float) and not math.isfinite(value) or isinstance(value, Decimal) and not value.is_finite():
            raise exc.CursorEncodeError(key, value)
        return str(value)
    elif type == FieldType.BOOLEAN and isinstance(value, bool):
        return 'true' if value else 'false'
    elif type == FieldType.TIMESTAMP and isinstance(value, date):
        return value.isoformat()
    elif type == FieldType.TEXT and isinstance(value, str):
        return value
    else:
        raise exc.CursorEncodeError(key, value)


def decode_value(type: FieldType, raw: str) -> Any:
    """ Parse a value from its canonical text form

    Numbers come back as `int` when they're integers, and as `Decimal` otherwise:
    a `Decimal` keeps every digit of a Numeric value, and `float()` of it gives back the very float that was encoded.

    Raises:
        ValueError: cannot parse
    """
    if type == FieldType.NUMBER:
        try:
            return int(raw)
        except ValueError:
            pass

        try:
            value = Decimal(raw)
        except InvalidOperation as e:
            raise ValueError(f'{raw!r} is not a number') from e
        if not value.is_finite():
            raise ValueError(f'{raw!r} is not a finite number')
        return value
    elif type == FieldType.BOOLEAN:
        try:
            return {'true': True, 'false': False}[raw]
        except KeyError as e:
            raise ValueError(f'{raw!r} is not a boolean') from e
    elif type == FieldType.TIMESTAMP:
        return datetime.fromisoformat(raw)
    else:
        return raw


def get_record_value(record: Any, key: str) -> Any:
    """ Get a value from a record: a dict row, or an object """
    try:
        if isinstance(record, abc.Mapping):
            return record[key]
        else:
            return getattr(record, key)
    except (KeyError, AttributeError) as e:
        raise exc.InvalidColumnError(type(record).__name__, key, where='result row') from e
