"""
camelCase <-> snake_case conversion between the dashboard's JSON and the
snake_case schemas, built on Pydantic's alias generators.
"""
from typing import Any

from pydantic import BaseModel
from pydantic.alias_generators import to_camel, to_snake


def to_camel_key(s: str) -> str:
    return to_camel(s)


def to_snake_key(s: str) -> str:
    return to_snake(s)


def camelize(obj: Any) -> Any:
    """Recursively camelCase dict keys. Only use on field-name keys, never on data-valued keys."""
    if isinstance(obj, dict):
        return {to_camel_key(k): camelize(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [camelize(x) for x in obj]
    return obj


def model_to_camel(model: BaseModel) -> dict[str, Any]:
    """JSON-ready dict of a snake_case schema with camelCase keys."""
    return camelize(model.model_dump(mode="json"))
