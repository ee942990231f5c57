"""Unit tests for query parameter sanitizers."""
from db.repositories.organizations import (
    ORGANIZATION_FILTERABLE_FIELDS,
    ORGANIZATION_SORTABLE_FIELDS,
)
from db.sanitizers import sanitize_filters, sanitize_pagination, sanitize_sort


class TestSanitizeFilters:
    def test_drops_unknown_and_empty_keys(self):
        filters = sanitize_filters(
            {"name": "Lead", "postal_code": "", "password": "x", "address_locality": None},
            ORGANIZATION_FILTERABLE_FIELDS,
        )
        assert filters == {"name": "Lead"}

    def test_accepts_json_text(self):
        filters = sanitize_filters('{"postal_code": "14"}', ORGANIZATION_FILTERABLE_FIELDS)
        assert filters == {"postal_code": "14"}

    def test_scalar_values_become_text_nested_values_dropped(self):
        filters = sanitize_filters(
            {"postal_code": 14, "name": {"$ne": ""}, "address_locality": ["Caen"]},
            ORGANIZATION_FILTERABLE_FIELDS,
        )
        assert filters == {"postal_code": "14"}

    def test_malformed_input_yields_no_filter(self):
        assert sanitize_filters("{not json", ORGANIZATION_FILTERABLE_FIELDS) == {}
        assert sanitize_filters(["name"], ORGANIZATION_FILTERABLE_FIELDS) == {}
        assert sanitize_filters(None, ORGANIZATION_FILTERABLE_FIELDS) == {}


class TestSanitizeSort:
    def test_allowed_field(self):
        assert sanitize_sort(["name", "DESC"], ORGANIZATION_SORTABLE_FIELDS) == ["name", "desc"]

    def test_json_text_and_default_direction(self):
        assert sanitize_sort('["postal_code"]', ORGANIZATION_SORTABLE_FIELDS) == ["postal_code", "asc"]

    def test_rejects_unknown_field_or_direction(self):
        assert sanitize_sort(["description", "ASC"], ORGANIZATION_SORTABLE_FIELDS) == []
        assert sanitize_sort(["name", "sideways"], ORGANIZATION_SORTABLE_FIELDS) == []
        assert sanitize_sort([], ORGANIZATION_SORTABLE_FIELDS) == []
        assert sanitize_sort(None, ORGANIZATION_SORTABLE_FIELDS) == []


class TestSanitizePagination:
    def test_defaults(self):
        assert sanitize_pagination(None) == (10, 1)
        assert sanitize_pagination("garbage") == (10, 1)

    def test_reads_values(self):
        assert sanitize_pagination({"perPage": 2, "currentPage": 3}) == (2, 3)
        assert sanitize_pagination('{"perPage": "5", "currentPage": "2"}') == (5, 2)

    def test_bounds(self):
        assert sanitize_pagination({"perPage": 1000, "currentPage": 1}) == (100, 1)
        assert sanitize_pagination({"perPage": 0, "currentPage": -4}) == (10, 1)
