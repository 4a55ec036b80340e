import pytest

from payloadtree.config import Settings


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def post_document():
    return {
        "data": {
            "type": "posts",
            "id": "1",
            "attributes": {"title": "T"},
            "relationships": {"author": {"data": {"type": "authors", "id": "1"}}},
        },
        "included": [{"type": "authors", "id": "1", "attributes": {"name": "Joe"}}],
    }
