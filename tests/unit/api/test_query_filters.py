from uuid import UUID, uuid4

import pytest

from src.api.error import ValidationError
from src.api.utils.pagination import paginate, query_filters
from src.domain.entities import ProductStatus

ALLOWED = {"is_active": bool, "product_type_id": UUID, "status": ProductStatus, "category": str}


def test_page_to_offset():
    page = paginate()(page=3, limit=20, offset=None)

    assert (page.limit, page.offset) == (20, 40)


def test_offset_wins_over_page():
    page = paginate()(page=3, limit=20, offset=5)

    assert page.offset == 5


def test_filters_are_coerced():
    type_id = uuid4()
    params = {
        "is_active": "false",
        "product_type_id": str(type_id),
        "status": "active",
        "category": "cards",
    }

    assert query_filters(params, ALLOWED) == {
        "is_active": False,
        "product_type_id": type_id,
        "status": ProductStatus.active,
        "category": "cards",
    }


def test_unknown_and_empty_params_are_ignored():
    assert query_filters({"sort": "name", "category": ""}, ALLOWED) == {}


@pytest.mark.parametrize(
    "name, raw",
    [("is_active", "maybe"), ("product_type_id", "not-a-uuid"), ("status", "deleted")],
)
def test_bad_values_raise_validation_error(name, raw):
    with pytest.raises(ValidationError) as exc_info:
        query_filters({name: raw}, ALLOWED)

    assert exc_info.value.base_error.code == "VALIDATION_ERROR"
    assert name in exc_info.value.base_error.message
