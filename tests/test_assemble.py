import pytest

from keysetpager.pager import CursorCodec, FieldType, Order, PageRequest, assemble_page


codec = CursorCodec({'id': FieldType.NUMBER})


def rows(*ids: int) -> list[dict]:
    return [{'id': id} for id in ids]


def cursor(id: int) -> str:
    return codec.encode({'id': id}, ['id'])


@pytest.mark.parametrize(('request_kwargs', 'fetched', 'expected_ids', 'expected_after', 'expected_before'), [
    # No cursor
    (dict(), rows(1, 2, 3), [1, 2], cursor(2), None),  # has more
    (dict(), rows(1, 2), [1, 2], None, None),  # exactly the limit
    (dict(), rows(1), [1], None, None),  # fewer
    # After cursor
    (dict(after_cursor=cursor(0)), rows(1, 2, 3), [1, 2], cursor(2), cursor(1)),
    (dict(after_cursor=cursor(0)), rows(1, 2), [1, 2], None, cursor(1)),
    # Before cursor: rows are reversed
    (dict(before_cursor=cursor(9)), rows(8, 7, 6), [7, 8], cursor(8), cursor(7)),
    (dict(before_cursor=cursor(9)), rows(8, 7), [7, 8], cursor(8), None),
    # Both: "after" wins, no reversal
    (dict(after_cursor=cursor(0), before_cursor=cursor(9)), rows(1, 2, 3), [1, 2], cursor(2), cursor(1)),
    (dict(after_cursor=cursor(0), before_cursor=cursor(9)), rows(1, 2), [1, 2], cursor(2), cursor(1)),
])
def test_assemble_page(request_kwargs: dict, fetched: list[dict], expected_ids: list[int], expected_after, expected_before):
    """ Test: trim, reverse, cursors """
    request = PageRequest(('id',), 'id', limit=2, order=Order.ASC, **request_kwargs)
    page = assemble_page(fetched, request, 2, codec)

    assert [row['id'] for row in page.data] == expected_ids
    assert page.cursor.after == expected_after
    assert page.cursor.before == expected_before
    assert len(page.data) <= 2


@pytest.mark.parametrize('request_kwargs', [
    dict(),
    dict(after_cursor=cursor(0)),
    dict(before_cursor=cursor(9)),
    dict(after_cursor=cursor(0), before_cursor=cursor(9)),
])
def test_assemble_empty_page(request_kwargs: dict):
    """ Test: no rows, no cursors """
    request = PageRequest(('id',), 'id', limit=2, **request_kwargs)
    page = assemble_page([], request, 2, codec)

    assert page.data == []
    assert page.cursor == (None, None)


def test_assemble_page_does_not_modify_rows():
    """ Test: the fetched list is left as it is """
    fetched = rows(3, 2, 1)
    request = PageRequest(('id',), 'id', limit=2, before_cursor=cursor(4))
    assemble_page(fetched, request, 2, codec)

    assert fetched == rows(3, 2, 1)
