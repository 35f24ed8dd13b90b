"""
Cached pydantic type adapters.

Both cache backends check entries against a requested type with strict
validation, so a value of the wrong type reads as a miss instead of
being coerced.
"""

from functools import lru_cache
from typing import Any

from pydantic import TypeAdapter


@lru_cache(maxsize=256)
def type_adapter(value_type: Any) -> TypeAdapter:
    return TypeAdapter(value_type)
