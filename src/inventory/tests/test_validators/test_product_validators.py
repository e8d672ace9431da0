import pytest

from inventory.validators.config_validators import to_lowercase, to_text, to_uppercase
from inventory.validators.product_validators import (
    RequestValidationFailed,
    collect_violations,
    is_non_negative_integer,
    validate_product_payload,
)

CATEGORY_ID = "65a1f0c2e4b0a1b2c3d4e5f6"


def _body(**overrides) -> dict:
    body = {
        "name": "Widget",
        "description": "A widget for testing purposes",
        "quantity": 5,
        "categories": [CATEGORY_ID],
    }
    body.update(overrides)
    return body


class TestCollectViolations:

    def test_valid_body_has_no_violations(self):
        assert collect_violations(_body()) == []

    def test_negative_quantity_reports_single_rule(self):
        """quantity: -1 violates only the integer rule, nothing else."""
        assert collect_violations(_body(quantity=-1)) == [
            {"field": "quantity", "message": "Quantity must be a non-negative integer"},
        ]

    def test_empty_body_reports_every_rule_in_declaration_order(self):
        assert collect_violations({}) == [
            {"field": "name", "message": "Product name is required"},
            {"field": "name", "message": "Name must be 3-100 characters"},
            {"field": "description", "message": "Description is required"},
            {"field": "description", "message": "Description must be 10-500 characters"},
            {"field": "quantity", "message": "Quantity is required"},
            {"field": "quantity", "message": "Quantity must be a non-negative integer"},
            {"field": "categories", "message": "At least one category is required"},
            {"field": "categories", "message": "Invalid category ID format"},
        ]

    def test_name_is_trimmed_before_length_check(self):
        violations = collect_violations(_body(name="   ab   "))

        assert violations == [{"field": "name", "message": "Name must be 3-100 characters"}]

    def test_whitespace_only_name_is_missing(self):
        fields = [v["message"] for v in collect_violations(_body(name="    "))]

        assert fields == ["Product name is required", "Name must be 3-100 characters"]

    @pytest.mark.parametrize("length, ok", [(100, True), (101, False), (3, True)])
    def test_name_length_bounds(self, length, ok):
        assert (collect_violations(_body(name="x" * length)) == []) is ok

    @pytest.mark.parametrize("length, ok", [(9, False), (10, True), (500, True), (501, False)])
    def test_description_length_bounds(self, length, ok):
        assert (collect_violations(_body(description="d" * length)) == []) is ok

    def test_empty_category_list_only_fails_minimum(self):
        assert collect_violations(_body(categories=[])) == [
            {"field": "categories", "message": "At least one category is required"},
        ]

    def test_malformed_category_id(self):
        assert collect_violations(_body(categories=[CATEGORY_ID, "not-an-id"])) == [
            {"field": "categories", "message": "Invalid category ID format"},
        ]

    def test_category_id_with_trailing_newline(self):
        assert collect_violations(_body(categories=[CATEGORY_ID + "\n"])) == [
            {"field": "categories", "message": "Invalid category ID format"},
        ]

    def test_categories_not_a_list_fails_both_rules(self):
        messages = [v["message"] for v in collect_violations(_body(categories=CATEGORY_ID))]

        assert messages == ["At least one category is required", "Invalid category ID format"]

    def test_non_object_body_is_treated_as_empty(self):
        assert len(collect_violations(["not", "an", "object"])) == 8


class TestQuantityRule:

    @pytest.mark.parametrize("value", [0, 5, "7", "+3", 4.0])
    def test_accepts(self, value):
        assert is_non_negative_integer(value)

    @pytest.mark.parametrize("value", [-1, "-1", 1.5, "1.5", "abc", "", None, True, "07", [1], "5\n", "5\n\n"])
    def test_rejects(self, value):
        assert not is_non_negative_integer(value)


class TestValidateProductPayload:

    def test_returns_trimmed_payload_with_integer_quantity(self):
        payload = validate_product_payload(_body(name="  Widget  ", description="  Long description  ", quantity="12"))

        assert payload.name == "Widget"
        assert payload.description == "Long description"
        assert payload.quantity == 12
        assert payload.categories == [CATEGORY_ID]

    def test_raises_with_all_errors(self):
        with pytest.raises(RequestValidationFailed) as exc_info:
            validate_product_payload(_body(name="ab", quantity=-1))

        assert exc_info.value.to_payload() == {
            "success": False,
            "message": "Validation failed",
            "errors": [
                {"field": "name", "message": "Name must be 3-100 characters"},
                {"field": "quantity", "message": "Quantity must be a non-negative integer"},
            ],
        }


class TestNormalisers:

    def test_case_helpers_strip(self):
        assert to_uppercase(" debug ") == "DEBUG"
        assert to_lowercase(" JSON ") == "json"
        assert to_uppercase(None) is None

    @pytest.mark.parametrize("value, expected", [(None, ""), ("x", "x"), (12, "12"), (True, "True")])
    def test_to_text(self, value, expected):
        assert to_text(value) == expected
