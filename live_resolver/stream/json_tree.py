"""
Validated navigation over untyped JSON values.

Every accessor either returns a value of the expected type or raises
SchemaMismatchError naming the field, so a changed upstream schema never
surfaces as a bare KeyError/TypeError.
"""

from typing import Any, Optional

from live_resolver.errors import SchemaMismatchError


def _lookup(node: Any, key: str) -> Any:
    if not isinstance(node, dict):
        raise SchemaMismatchError(key, f"parent is {type(node).__name__}, not an object")
    return node.get(key)


def require_dict(node: Any, key: str) -> dict[str, Any]:
    """Get a required object field."""
    value = _lookup(node, key)
    if not isinstance(value, dict):
        raise SchemaMismatchError(key, "expected an object")
    return value


def optional_dict(node: Any, key: str) -> dict[str, Any]:
    """Get an object field, treating absence/null as an empty object."""
    value = _lookup(node, key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise SchemaMismatchError(key, "expected an object")
    return value


def require_list(node: Any, key: str) -> list[Any]:
    """Get a required array field."""
    value = _lookup(node, key)
    if not isinstance(value, list):
        raise SchemaMismatchError(key, "expected an array")
    return value


def optional_list(node: Any, key: str) -> list[Any]:
    """Get an array field, treating absence/null as an empty array."""
    value = _lookup(node, key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise SchemaMismatchError(key, "expected an array")
    return value


def require_str(node: Any, key: str) -> str:
    """Get a required string field."""
    value = _lookup(node, key)
    if not isinstance(value, str):
        raise SchemaMismatchError(key, "expected a string")
    return value


def optional_str(node: Any, key: str, default: str = "") -> str:
    """Get a string field, falling back to default when absent or not a string."""
    if not isinstance(node, dict):
        return default
    value = node.get(key)
    return value if isinstance(value, str) else default


def require_int(node: Any, key: str) -> int:
    """Get a required non-negative integer field."""
    value = _lookup(node, key)
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise SchemaMismatchError(key, "expected a non-negative integer")
    return value


def optional_int(node: Any, key: str) -> Optional[int]:
    """Get an integer field, accepting numeric strings. None if absent or unparsable."""
    if not isinstance(node, dict):
        return None
    value = node.get(key)
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None
