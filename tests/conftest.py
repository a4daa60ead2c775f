import pytest

from app.services.schema_builder import schema_for_general


@pytest.fixture(autouse=True)
def _reset_rate_limit():
    from app import main
    main._buckets.clear()
    yield
    main._buckets.clear()


@pytest.fixture
def mens_eu_schema():
    return schema_for_general("jacket", "male")


@pytest.fixture
def collar_schema():
    return schema_for_general("shirt", "male")


def _make_product(title, values, handle=None, tags=None, option_name="Size"):
    return {
        "title": title,
        "handle": handle or title.lower().replace(" ", "-"),
        "tags": tags or [],
        "options": [option_name],
        "variants": [{"option1": v} for v in values],
    }


@pytest.fixture
def make_product():
    return _make_product
