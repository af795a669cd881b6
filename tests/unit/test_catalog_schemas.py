"""Unit tests for ct_catalog request schemas."""

import pytest
from pydantic import ValidationError

from src.ct_catalog.application.schemas import ProductCreateRequest, ProductUpdateRequest


class TestProductCreateRequest:
    def test_strips_name(self) -> None:
        req = ProductCreateRequest(name="  Lamp ", price_cents=100, stock=1)
        assert req.name == "Lamp"

    def test_blank_name(self) -> None:
        with pytest.raises(ValidationError):
            ProductCreateRequest(name="   ", price_cents=100, stock=1)

    def test_negative_price(self) -> None:
        with pytest.raises(ValidationError):
            ProductCreateRequest(name="Lamp", price_cents=-1, stock=1)

    def test_negative_stock(self) -> None:
        with pytest.raises(ValidationError):
            ProductCreateRequest(name="Lamp", price_cents=100, stock=-1)

    def test_free_product_allowed(self) -> None:
        assert ProductCreateRequest(name="Sticker", price_cents=0, stock=1).price_cents == 0


class TestProductUpdateRequest:
    def test_price_maps_to_column(self) -> None:
        assert ProductUpdateRequest(price_cents=250).to_changes() == {"price": 250}

    def test_unset_fields_omitted(self) -> None:
        assert ProductUpdateRequest().to_changes() == {}

    def test_null_clears_nullable_columns_only(self) -> None:
        req = ProductUpdateRequest(category=None, name=None)
        assert req.to_changes() == {"category": None}
