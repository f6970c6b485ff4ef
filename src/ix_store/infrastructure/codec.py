"""Entity <-> JSON payload conversion.

Uses a cached pydantic TypeAdapter per dataclass kind: ints stay exact (JSONB
numerics are arbitrary precision), Decimals round-trip as strings, enums as values.
"""
from functools import lru_cache
from typing import Any, TypeVar

from pydantic import TypeAdapter

E = TypeVar("E")


@lru_cache(maxsize=None)
def _adapter(kind: type[Any]) -> TypeAdapter[Any]:
    return TypeAdapter(kind)


def encode_entity(entity: Any) -> str:
    return _adapter(type(entity)).dump_json(entity).decode()


def decode_entity(kind: type[E], payload: str | bytes | dict[str, Any]) -> E:
    """Rebuild an entity; asyncpg hands JSONB back as text unless a codec is set."""
    adapter = _adapter(kind)
    if isinstance(payload, dict):
        return adapter.validate_python(payload)  # type: ignore[no-any-return]
    return adapter.validate_json(payload)  # type: ignore[no-any-return]
