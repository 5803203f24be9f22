import pytest

from keysetpager.sainfo.names import pascal_to_underscore


@pytest.mark.parametrize(('name', 'expected'), [
    ('User', 'user'),
    ('BlogArticle', 'blog_article'),
    ('HTTPRequestLog', 'http_request_log'),
    ('Article2Tag', 'article2_tag'),
    ('already_snake', 'already_snake'),
])
def test_pascal_to_underscore(name: str, expected: str):
    assert pascal_to_underscore(name) == expected
