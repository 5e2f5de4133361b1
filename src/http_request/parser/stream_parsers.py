"""Terminal parsers reading the response body stream."""

import json
from typing import Any, BinaryIO, Generic, Type, TypeVar

from pydantic import TypeAdapter, ValidationError

from ..core.exceptions import ParserError
from .base import InputStreamParser, XferTransformInputStreamString, response_charset

T = TypeVar("T")


class InputStreamBytesParser(InputStreamParser[bytes]):
    """Body passed through as bytes."""

    INSTANCE: 'InputStreamBytesParser'

    def parse_input_stream(self, stream: BinaryIO, request) -> bytes:
        return stream.read()


InputStreamBytesParser.INSTANCE = InputStreamBytesParser()


class InputStreamStringParser(InputStreamParser[str]):
    """Body decoded as text with the response charset."""

    INSTANCE: 'InputStreamStringParser'

    def parse_input_stream(self, stream: BinaryIO, request) -> str:
        return XferTransformInputStreamString.INSTANCE.transform_data(stream, request)


InputStreamStringParser.INSTANCE = InputStreamStringParser()


class InputStreamJSONObjectParser(InputStreamParser[dict]):
    """Body parsed as a JSON object."""

    INSTANCE: 'InputStreamJSONObjectParser'

    def parse_input_stream(self, stream: BinaryIO, request) -> dict:
        text = InputStreamStringParser.INSTANCE.parse_input_stream(stream, request)
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ParserError(f"Bad JSON data: {e.msg}", source_data=text, request=request) from e
        if not isinstance(data, dict):
            raise ParserError("Bad JSON data: expected an object", source_data=text, request=request)
        return data


InputStreamJSONObjectParser.INSTANCE = InputStreamJSONObjectParser()


class InputStreamModelParser(InputStreamParser[T], Generic[T]):
    """
    Body validated straight into a typed object by pydantic.

    With `enable_debug_data(True)` the raw body is attached to the
    ParserError on failure; it is off by default since bodies can be large.

    Example:
        >>> parser = InputStreamModelParser(List[Status])
        >>> parser.enable_debug_data(True)
    """

    def __init__(self, model: Type[T]):
        self.model = model
        self._adapter = TypeAdapter(model)
        self._debug_data = False

    def enable_debug_data(self, enable: bool) -> None:
        self._debug_data = enable

    def parse_input_stream(self, stream: BinaryIO, request) -> T:
        raw: Any = stream.read()
        try:
            return self._adapter.validate_json(raw)
        except ValidationError as e:
            source = None
            if self._debug_data:
                source = raw.decode(response_charset(request), errors="replace")
            raise ParserError("Bad Json data", source_data=source, request=request) from e
