__version__ = __import__('importlib.metadata').metadata.version('keysetpager')

from .pager import Paginator, PageRequest, PageResult, NextCursor
from .pager import CursorCodec, FieldType, Order
from .settings import PagerSettings

from . import exc
