"""Tests for the price catalog."""

import pytest

from calculator.pricing import (
    CatalogEntry,
    DefaultPriceCatalog,
    PriceCategory,
    QualityLevel,
    QUALITY_MULTIPLIERS,
)


def test_labor_is_tier_independent_and_materials_vary():
    catalog = DefaultPriceCatalog()

    prices = [catalog.price(PriceCategory.FLOORING, "laminate", level) for level in QualityLevel]

    assert {price.labor for price in prices} == {25}
    assert [price.material for price in prices] == [20, 35, 60]
    assert prices[0].unit == "sqm"


def test_work_items_have_no_material_price():
    catalog = DefaultPriceCatalog()
    for key in catalog.items_in(PriceCategory.WORK):
        assert catalog.price(PriceCategory.WORK, key, QualityLevel.PREMIUM).material == 0


def test_unknown_key_raises():
    with pytest.raises(KeyError):
        DefaultPriceCatalog().price(PriceCategory.FLOORING, "marble", QualityLevel.STANDARD)


def test_overrides_extend_catalog():
    catalog = DefaultPriceCatalog({PriceCategory.FLOORING: {"marble": CatalogEntry(70, "sqm", (80, 120, 250))}})

    assert catalog.price(PriceCategory.FLOORING, "marble", QualityLevel.PREMIUM).material == 250
    # built-in data is not modified
    assert "marble" not in DefaultPriceCatalog().items_in(PriceCategory.FLOORING)


def test_quality_multipliers():
    assert QUALITY_MULTIPLIERS[QualityLevel.ECONOMY] == 0.85
    assert QUALITY_MULTIPLIERS[QualityLevel.STANDARD] == 1.0
    assert QUALITY_MULTIPLIERS[QualityLevel.PREMIUM] == 1.4
