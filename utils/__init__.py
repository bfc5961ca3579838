"""Shared utilities for the backend."""
from utils.serialization import camelize, model_to_camel, to_camel_key, to_snake_key

__all__ = [
    "camelize",
    "model_to_camel",
    "to_camel_key",
    "to_snake_key",
]
