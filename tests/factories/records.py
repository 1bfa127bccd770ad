"""Record types and builders used across the test suite."""

from datetime import date
from decimal import Decimal
from typing import ClassVar
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from chronicle.versioning.models import VersionedRecord


class Widget(VersionedRecord[int]):
    """Small record with scalar fields."""

    name: str = ""
    value: int = 0
    is_active: bool = True


class Dimensions(BaseModel):
    width: float
    height: float


class Product(VersionedRecord[UUID]):
    """Record exercising structured and optional field types."""

    untracked_fields: ClassVar[frozenset[str]] = frozenset({"search_text"})

    name: str
    price: Decimal
    tags: list[str] = Field(default_factory=list)
    released_on: date | None = None
    dimensions: Dimensions | None = None
    search_text: str = ""


class WidgetFactory:
    """Builds Widget records with sequential ids."""

    _next_id = 1

    @classmethod
    def build(cls, **overrides) -> Widget:
        data = {"id": cls._next_id, "name": "Initial", "value": 10}
        cls._next_id += 1
        data.update(overrides)
        return Widget(**data)


def make_product(**overrides) -> Product:
    data = {
        "id": uuid4(),
        "name": "Desk",
        "price": Decimal("199.00"),
        "tags": ["office"],
        "released_on": date(2024, 3, 1),
        "dimensions": Dimensions(width=120.0, height=75.0),
    }
    data.update(overrides)
    return Product(**data)
