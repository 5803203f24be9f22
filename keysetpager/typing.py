from typing import Union

import sqlalchemy as sa
import sqlalchemy.orm
import sqlalchemy.ext.asyncio


# Annotation for SqlAlchemy models
SAModel = type

# Annotation for SqlAlchemy models or aliased classes
SAModelOrAlias = Union[SAModel, sa.orm.util.AliasedClass]

# Annotation for SqlAlchemy instances (objects)
SAInstance = object

# Annotation for dict rows (result rows returned as dicts)
SARowDict = dict

# A row of the paginated result: dict row, or an ORM instance
SARow = Union[SARowDict, SAInstance]

# An SqlAlchemy attribute
# That is, the instrumented attribute you get when accessing <model>.<attribute>
SAAttribute = Union[sa.orm.attributes.InstrumentedAttribute, sa.orm.interfaces.MapperProperty]  # type: ignore[name-defined]

# Something that can execute a statement synchronously
SAConnectable = Union[sa.engine.Connection, sa.orm.Session]

# Something that can execute a statement asynchronously
SAAsyncConnectable = Union[sa.ext.asyncio.AsyncConnection, sa.ext.asyncio.AsyncSession]

# A pre-filtered record subset to paginate over
SASubqueryLike = Union[sa.sql.expression.Select, sa.sql.expression.Subquery, sa.sql.expression.TextClause, sa.sql.expression.TextualSelect]
