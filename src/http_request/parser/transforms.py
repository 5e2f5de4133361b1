"""Text -> JSON -> typed object transforms."""

import json
from typing import Any, Generic, Type, TypeVar

from pydantic import TypeAdapter, ValidationError

from ..core.exceptions import ParserError
from .base import XferTransform

T = TypeVar("T")


class XferTransformStringJSON(XferTransform[str, Any]):
    """Text -> JSON value (dict, list, str, number, bool or None)."""

    INSTANCE: 'XferTransformStringJSON'

    def transform_data(self, data, request):
        try:
            return json.loads(data)
        except json.JSONDecodeError as e:
            raise ParserError(f"Bad JSON data: {e.msg}", source_data=data, request=request) from e


XferTransformStringJSON.INSTANCE = XferTransformStringJSON()


class XferTransformJSONObject(XferTransform[Any, dict]):
    """Checks that a JSON value is an object."""

    INSTANCE: 'XferTransformJSONObject'

    def transform_data(self, data, request):
        if not isinstance(data, dict):
            raise ParserError(
                f"Bad JSON data: expected an object, got {type(data).__name__}",
                source_data=data,
                request=request,
            )
        return data


XferTransformJSONObject.INSTANCE = XferTransformJSONObject()


class XferTransformJSONModel(XferTransform[Any, T], Generic[T]):
    """
    JSON value -> typed object, validated by pydantic.

    Works with any type pydantic understands: BaseModel subclasses,
    dataclasses, TypedDict, List[...], etc.

    Example:
        >>> class User(BaseModel):
        ...     id: int
        ...     name: str
        >>> XferTransformJSONModel(User).transform_data({"id": 1, "name": "a"}, None)
        User(id=1, name='a')
    """

    def __init__(self, model: Type[T]):
        self.model = model
        self._adapter = TypeAdapter(model)

    @property
    def name(self) -> str:
        return f"{self.__class__.__name__}[{getattr(self.model, '__name__', self.model)}]"

    def transform_data(self, data: Any, request) -> T:
        try:
            return self._adapter.validate_python(data)
        except ValidationError as e:
            raise ParserError(
                f"Bad JSON data: {e.error_count()} validation error(s) for {self.name}",
                source_data=data,
                request=request,
            ) from e


def dump_json(value: Any) -> str:
    """Compact JSON string of a parsed value."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)

