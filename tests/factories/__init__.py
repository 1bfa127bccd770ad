"""Test factories for creating test data."""

from tests.factories.records import (
    Dimensions,
    Product,
    Widget,
    WidgetFactory,
    make_product,
)

__all__ = [
    "Dimensions",
    "Product",
    "Widget",
    "WidgetFactory",
    "make_product",
]
