import sqlalchemy as sa
import sqlalchemy.orm

from keysetpager.typing import SAModelOrAlias


def unaliased_class(Model: SAModelOrAlias) -> type:
    """ Get the actual model class; unaliased, if was

    Args:
         Model: model class or AliasedClass
    """
    return sa.orm.class_mapper(Model).class_


def mapped_column_names(Model: SAModelOrAlias) -> tuple[str, ...]:
    """ Get the names of all column attributes of a model """
    return tuple(
        prop.key
        for prop in sa.orm.class_mapper(Model).column_attrs
    )
