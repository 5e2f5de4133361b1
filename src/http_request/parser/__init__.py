"""
Response parsers.

Ready-made response parsers (HttpResponse -> value):

    BODY_TO_STRING   - body as text
    BODY_TO_BYTES    - body as bytes
    BODY_TO_JSON     - body as a JSON value
    body_to_model(T) - body validated into T by pydantic

Example:
    >>> request = (BaseHttpRequest.Builder()
    ...            .set_url("https://api.example.com/users/1")
    ...            .set_response_parser(body_to_model(User))
    ...            .build())
"""

from typing import Type, TypeVar

from .base import (
    InputStreamParser,
    XferTransform,
    XferTransformChain,
    XferTransformInputStreamString,
    XferTransformResponseInputStream,
)
from .stream_parsers import (
    InputStreamBytesParser,
    InputStreamJSONObjectParser,
    InputStreamModelParser,
    InputStreamStringParser,
)
from .transforms import XferTransformJSONModel, XferTransformJSONObject, XferTransformStringJSON

T = TypeVar("T")

BODY_TO_STRING = XferTransformResponseInputStream.INSTANCE.then(InputStreamStringParser.INSTANCE)
BODY_TO_BYTES = XferTransformResponseInputStream.INSTANCE.then(InputStreamBytesParser.INSTANCE)
BODY_TO_JSON = (
    XferTransformResponseInputStream.INSTANCE
    .then(XferTransformInputStreamString.INSTANCE)
    .then(XferTransformStringJSON.INSTANCE)
)
BODY_TO_JSON_OBJECT = BODY_TO_JSON.then(XferTransformJSONObject.INSTANCE)


def body_to_model(model: Type[T]) -> XferTransformChain:
    """Response parser producing `model` instances."""
    return BODY_TO_JSON.then(XferTransformJSONModel(model))


__all__ = [
    "XferTransform",
    "XferTransformChain",
    "InputStreamParser",
    "XferTransformResponseInputStream",
    "XferTransformInputStreamString",
    "XferTransformStringJSON",
    "XferTransformJSONObject",
    "XferTransformJSONModel",
    "InputStreamBytesParser",
    "InputStreamStringParser",
    "InputStreamJSONObjectParser",
    "InputStreamModelParser",
    "BODY_TO_STRING",
    "BODY_TO_BYTES",
    "BODY_TO_JSON",
    "BODY_TO_JSON_OBJECT",
    "body_to_model",
]
