"""Unit tests for the Product aggregate."""

import pytest

from orderdesk.domain.exceptions import ValidationError
from orderdesk.domain.model.product import Product
from orderdesk.domain.model.value_objects import Money


class TestProductValidation:

    def test_valid_product(self):
        Product(id=None, name="Widget", price=Money.of("1.00")).validate()

    def test_blank_name(self):
        with pytest.raises(ValidationError) as excinfo:
            Product(id=None, name="  ", price=Money.of("1.00")).validate()
        assert excinfo.value.violations == {
            "name": [
                "Product name must not be blank.",
                "Product name must be at least 2 characters long.",
            ]
        }

    def test_short_name(self):
        with pytest.raises(ValidationError, match="Product validation failed"):
            Product(id=None, name="A", price=Money.of("1.00")).validate()

    def test_missing_price(self):
        product = Product(id=None, name="Widget", price=None)
        assert [v.field for v in product.violations()] == ["price"]

    def test_price_above_column_limit(self):
        product = Product(id=None, name="Widget", price=Money.of("100000000.00"))
        assert [v.message for v in product.violations()] == [
            "Product price must not exceed 99999999.99."
        ]

    def test_update_price(self):
        product = Product(id=1, name="Widget", price=Money.of("1.00"))
        product.update_price(Money.of("2.00"))
        assert product.price == Money.of("2.00")

