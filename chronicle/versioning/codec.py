"""Canonical value codec for field-change entries.

Values are stored as canonical JSON text: keys sorted, compact separators,
non-ASCII kept as-is. ``None`` is never encoded; an absent value is stored
as ``None`` rather than the string ``"null"``.

Decoding is typed: the caller names the target type (usually a field's
annotation) and a cached pydantic ``TypeAdapter`` for that type validates
the JSON back into it.
"""

import json
from functools import lru_cache
from typing import Any, TypeVar

from pydantic import PydanticSchemaGenerationError, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_jsonable_python

from chronicle.db.errors import SerializationError
from chronicle.observability.metrics import SERIALIZATION_ERRORS

T = TypeVar("T")


@lru_cache(maxsize=256)
def _adapter_for(type_: Any) -> TypeAdapter[Any]:
    return TypeAdapter(type_)


def get_adapter(type_: Any) -> TypeAdapter[Any]:
    """Return the cached TypeAdapter for ``type_``.

    Unhashable type descriptors (rare, e.g. some Annotated metadata) get a
    fresh adapter each time.
    """
    try:
        return _adapter_for(type_)
    except TypeError:
        return TypeAdapter(type_)


def encode(value: Any) -> str | None:
    """Encode a value to its canonical JSON text.

    Args:
        value: Primitive, string, date/datetime, UUID, enum, Decimal,
            pydantic model, dataclass, or a list/dict of those.

    Returns:
        Canonical JSON string, or None when value is None.

    Raises:
        SerializationError: If the value has no JSON representation.
    """
    if value is None:
        return None

    try:
        plain = to_jsonable_python(value)
        return json.dumps(
            plain,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
        )
    except (PydanticSerializationError, TypeError, ValueError) as e:
        SERIALIZATION_ERRORS.labels(direction="encode").inc()
        raise SerializationError(
            f"Cannot encode value of type {type(value).__name__}: {e}", cause=e
        ) from e


def decode(encoded: str | None, type_: type[T] | Any) -> T | None:
    """Decode canonical JSON text into a value of ``type_``.

    Returns:
        The decoded value, or None for None/empty input.

    Raises:
        SerializationError: If the text is malformed, does not validate
            against ``type_``, or ``type_`` has no pydantic schema.
    """
    if encoded is None or encoded == "":
        return None

    try:
        return get_adapter(type_).validate_json(encoded)
    except (ValidationError, PydanticSchemaGenerationError) as e:
        SERIALIZATION_ERRORS.labels(direction="decode").inc()
        raise SerializationError(
            f"Cannot decode {encoded!r} as {getattr(type_, '__name__', type_)}: {e}",
            cause=e,
        ) from e
