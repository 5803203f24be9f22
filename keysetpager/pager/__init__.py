""" Keyset pagination

Keyset pagination resumes from the key values of a row rather than from a numeric offset.
This gives stable pages: rows that are inserted or deleted meanwhile do not cause duplicates or skipped rows.
"""

from .codec import CursorCodec, FieldType
from .order import Order, ResolvedOrder, resolve_order, flip_order
from .page import PageRequest, PageResult, NextCursor
from .paginator import Paginator, assemble_page
