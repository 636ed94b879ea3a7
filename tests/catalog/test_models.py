"""Tests for the product record model."""

import pytest
from pydantic import ValidationError

from productsearch.catalog.models import Product, ProductUpdate


class TestProduct:
    """Tests for Product."""

    def test_defaults(self) -> None:
        """Only the id is required."""
        product = Product(id="p1")
        assert product.name == ""
        assert product.description == ""
        assert product.price == 0.0
        assert product.category == ""

    def test_empty_id_rejected(self) -> None:
        """A product cannot be addressed without an id."""
        with pytest.raises(ValidationError):
            Product(id="")

    def test_negative_price_rejected(self) -> None:
        """Prices are non-negative."""
        with pytest.raises(ValidationError):
            Product(id="p1", price=-0.01)

    def test_nan_price_rejected(self) -> None:
        """NaN prices cannot take part in range queries."""
        with pytest.raises(ValidationError):
            Product(id="p1", price=float("nan"))

    def test_to_document_includes_all_fields(self) -> None:
        """The index document carries every field."""
        product = Product(id="p1", name="Widget", price=9.99, category="tools")
        assert product.to_document() == {
            "id": "p1",
            "name": "Widget",
            "description": "",
            "price": 9.99,
            "category": "tools",
        }

    def test_from_document_prefers_document_id(self) -> None:
        """The index key wins over a stale id in the stored body."""
        product = Product.from_document("p2", {"id": "old", "name": "Hammer", "price": 15})
        assert product.id == "p2"
        assert product.name == "Hammer"
        assert product.price == 15.0

    def test_from_document_ignores_unknown_fields(self) -> None:
        """Extra fields in a flexible-schema document are dropped."""
        product = Product.from_document("p1", {"name": "Widget", "color": "red"})
        assert product == Product(id="p1", name="Widget")


class TestProductUpdate:
    """Tests for ProductUpdate."""

    def test_partial_document_only_has_supplied_fields(self) -> None:
        """Unset fields are not merged."""
        changes = ProductUpdate(price=12.5)
        assert changes.to_partial_document() == {"price": 12.5}

    def test_explicit_empty_string_is_kept(self) -> None:
        """Clearing a field is different from leaving it out."""
        changes = ProductUpdate.model_validate({"description": ""})
        assert changes.to_partial_document() == {"description": ""}

    def test_id_in_body_is_ignored(self) -> None:
        """The id of an update comes from the address, not the body."""
        changes = ProductUpdate.model_validate({"id": "other", "name": "Renamed"})
        assert changes.to_partial_document() == {"name": "Renamed"}

    def test_negative_price_rejected(self) -> None:
        """Updates follow the same price rule as products."""
        with pytest.raises(ValidationError):
            ProductUpdate(price=-1)
