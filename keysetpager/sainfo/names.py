import re

from keysetpager.typing import SAModelOrAlias
from .models import unaliased_class


def model_name(Model: SAModelOrAlias) -> str:
    """ Get the name of the Model for this class """
    # We can't do `Model.__name__` because we can be given a type of an aliased class
    return unaliased_class(Model).__name__


def default_alias(Model: SAModelOrAlias) -> str:
    """ Get the default SQL alias for a model: its name in snake_case

    Example:
        BlogArticle -> blog_article
    """
    return pascal_to_underscore(model_name(Model))


def pascal_to_underscore(name: str) -> str:
    """ Convert a PascalCase name to snake_case """
    return PASCAL_BOUNDARY_REX.sub('_', name).lower()


# A position where a new capitalized word starts
PASCAL_BOUNDARY_REX = re.compile(r'(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])')
