"""
Helpers for interpreting tracker API payloads.

The tracker API is not consistent about list responses: some endpoints return
a bare array, others wrap it in an object. These helpers flatten both shapes
and turn items into schema objects, skipping entries that don't validate.
"""
from typing import Any, List, Optional, Type, TypeVar
import logging

from pydantic import BaseModel, ValidationError

logger = logging.getLogger("jobtrack.payloads")

ModelT = TypeVar("ModelT", bound=BaseModel)


def unwrap_list(data: Any, key: Optional[str] = None) -> List[Any]:
    """Return `data` if it is a list, `data[key]` if that is a list, else []."""
    if isinstance(data, list):
        return data
    if key and isinstance(data, dict) and isinstance(data.get(key), list):
        return data[key]
    if data is not None:
        logger.warning(f"Unexpected payload shape ({type(data).__name__}), using empty list")
    return []


def parse_model(model: Type[ModelT], item: Any) -> Optional[ModelT]:
    if not isinstance(item, dict):
        return None
    try:
        return model.model_validate(item)
    except ValidationError as e:
        logger.warning(f"Skipping invalid {model.__name__}: {e.error_count()} error(s)")
        return None


def parse_models(model: Type[ModelT], items: List[Any]) -> List[ModelT]:
    parsed = (parse_model(model, item) for item in items)
    return [p for p in parsed if p is not None]
