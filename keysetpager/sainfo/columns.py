from __future__ import annotations

from collections import abc
from typing import Optional

import sqlalchemy as sa
from sqlalchemy import TypeDecorator
from sqlalchemy.orm import ColumnProperty, QueryableAttribute

from keysetpager import exc
from keysetpager.pager.codec import FieldType
from keysetpager.sainfo.names import model_name
from keysetpager.typing import SAModelOrAlias, SAAttribute


def resolve_column_by_name(field_name: str, Model: SAModelOrAlias, *, where: str) -> QueryableAttribute:
    # As simple as it looks, this code invokes __getattr__() on sa.orm.AliasedClass which adapts the SQL expression
    # to make sure it uses the proper aliased name in queries
    try:
        attribute = getattr(Model, field_name)
    except AttributeError as e:
        raise exc.InvalidColumnError(model_name(Model), field_name, where=where) from e

    # Check that it actually is a column
    if not is_column_property(attribute):
        raise exc.InvalidColumnError(model_name(Model), field_name, where=where)

    # Done
    return attribute


def resolve_key_types(Model: SAModelOrAlias, keys: abc.Iterable[str], key_types: Optional[abc.Mapping[str, FieldType]] = None) -> dict[str, FieldType]:
    """ Get a type for every pagination key

    Explicitly provided types win. Other keys get their types from the column definitions.

    Raises:
        exc.InvalidColumnError: a key is not a column
        exc.UnknownFieldTypeError: the column has a type that cursors do not support
    """
    key_types = key_types or {}

    ret = {}
    for key in keys:
        if key in key_types:
            ret[key] = FieldType(key_types[key])
        else:
            ret[key] = get_field_type(resolve_column_by_name(key, Model, where='pagination keys'), Model)
    return ret


# region: Column Attribute types

def is_column_property(attribute: SAAttribute) -> bool:
    return (
        isinstance(attribute, QueryableAttribute) and
        isinstance(attribute.property, ColumnProperty)
    )

# endregion


# region Column Attribute info

def get_column_type(attribute: SAAttribute) -> sa.types.TypeEngine:
    """ Get column's SQL type """
    if isinstance(attribute.type, TypeDecorator):
        # Type decorators wrap other types, so we have to handle them carefully
        return attribute.type.impl
    else:
        return attribute.type


def get_field_type(attribute: SAAttribute, Model: SAModelOrAlias) -> FieldType:
    """ Get the cursor value type for a column

    Raises:
        exc.UnknownFieldTypeError: unsupported column type
    """
    column_type = get_column_type(attribute)

    # NOTE: order matters: Boolean and Enum are subclasses of other types
    if isinstance(column_type, sa.Boolean):
        return FieldType.BOOLEAN
    elif isinstance(column_type, sa.Enum):
        # Only string enums are ok. Python Enum classes would give us objects
        if column_type.enum_class is None:
            return FieldType.TEXT
    elif isinstance(column_type, (sa.Integer, sa.Numeric)):
        return FieldType.NUMBER
    elif isinstance(column_type, sa.DateTime):
        return FieldType.TIMESTAMP
    elif isinstance(column_type, sa.String):
        return FieldType.TEXT

    raise exc.UnknownFieldTypeError(model_name(Model), attribute.key, column_type)

# endregion

