"""
Response parsing pipeline.

An `XferTransform` turns one kind of network data into another (response ->
stream -> text -> JSON -> typed object). Transforms are composed with
`then()` into an `XferTransformChain`; a failing stage is reported as a
`ParserError` that carries the data the stage received.

Transforms must not keep per-request state: one instance is shared by every
request that uses it.
"""

import io
from abc import ABC, abstractmethod
from typing import Any, BinaryIO, Generic, List, Optional, TypeVar, TYPE_CHECKING

from ..core.exceptions import ParserError

if TYPE_CHECKING:
    from ..core.request import BaseHttpRequest

INPUT = TypeVar("INPUT")
OUTPUT = TypeVar("OUTPUT")
T = TypeVar("T")

# Errors a stage may raise on bad input
STAGE_ERRORS = (ValueError, TypeError, KeyError, LookupError)


def snapshot_data(data: Any) -> Any:
    """Value to keep as diagnostic source data (buffers are copied out)."""
    if isinstance(data, (io.BytesIO, io.StringIO)):
        return data.getvalue()
    return data


class XferTransform(ABC, Generic[INPUT, OUTPUT]):
    """Transform network data from INPUT to OUTPUT."""

    @abstractmethod
    def transform_data(self, data: INPUT, request: Optional['BaseHttpRequest']) -> OUTPUT:
        """
        Transform `data`.

        Args:
            data: Input data
            request: Request that produced the data (may be None)

        Raises:
            ParserError: The data cannot be transformed
        """
        pass

    @property
    def name(self) -> str:
        return self.__class__.__name__

    def then(self, next_transform: 'XferTransform[OUTPUT, T]') -> 'XferTransformChain':
        """Compose: run `self`, then `next_transform` on its output."""
        return XferTransformChain([self, next_transform])

    def __repr__(self) -> str:
        return f"<{self.name}>"


class XferTransformChain(XferTransform[Any, Any]):
    """
    Ordered list of transforms run one after another.

    Example:
        >>> chain = XferTransformResponseInputStream.INSTANCE.then(
        ...     XferTransformInputStreamString.INSTANCE
        ... ).then(XferTransformStringJSON.INSTANCE)
        >>> len(chain)
        3
    """

    def __init__(self, stages: List[XferTransform]):
        flat: List[XferTransform] = []
        for stage in stages:
            if isinstance(stage, XferTransformChain):
                flat.extend(stage.stages)
            else:
                flat.append(stage)
        if not flat:
            raise ValueError("a transform chain needs at least one stage")
        self._stages = tuple(flat)

    @property
    def stages(self) -> tuple:
        return self._stages

    @property
    def name(self) -> str:
        return " -> ".join(stage.name for stage in self._stages)

    def then(self, next_transform: XferTransform) -> 'XferTransformChain':
        return XferTransformChain([self, next_transform])

    def transform_data(self, data: Any, request: Optional['BaseHttpRequest']) -> Any:
        raw_data = None
        for index, stage in enumerate(self._stages, 1):
            if raw_data is None:
                snapshot = snapshot_data(data)
                if isinstance(snapshot, (bytes, bytearray, str)):
                    raw_data = snapshot
            try:
                data = stage.transform_data(data, request)
            except ParserError as e:
                source = e.source_data if e.source_data is not None else snapshot_data(data)
                raise ParserError(
                    e.message,
                    source_data=source,
                    stage=f"{index}:{stage.name}",
                    raw_data=e.raw_data if e.raw_data is not None else raw_data,
                    request=request,
                ) from e
            except STAGE_ERRORS as e:
                raise ParserError(
                    f"{stage.name} failed: {e}",
                    source_data=snapshot_data(data),
                    stage=f"{index}:{stage.name}",
                    raw_data=raw_data,
                    request=request,
                ) from e
        return data

    def __len__(self) -> int:
        return len(self._stages)


class InputStreamParser(XferTransform[BinaryIO, T]):
    """
    Terminal parser: turn the response body stream into an object of type T.

    Subclasses implement `parse_input_stream()`.
    """

    @abstractmethod
    def parse_input_stream(self, stream: BinaryIO, request: Optional['BaseHttpRequest']) -> T:
        """
        Parse the data read from `stream`.

        Args:
            stream: Response body stream
            request: Request that was used to get the stream

        Returns:
            Parsed object
        """
        pass

    def transform_data(self, data: BinaryIO, request: Optional['BaseHttpRequest']) -> T:
        return self.parse_input_stream(data, request)


class XferTransformResponseInputStream(XferTransform[Any, BinaryIO]):
    """HttpResponse -> decoded body stream."""

    INSTANCE: 'XferTransformResponseInputStream'

    def transform_data(self, data, request):
        return data.get_content_stream()


XferTransformResponseInputStream.INSTANCE = XferTransformResponseInputStream()


def response_charset(request: Optional['BaseHttpRequest'], default: str = "utf-8") -> str:
    """Charset declared by the response of `request`, or `default`."""
    response = request.get_response() if request is not None else None
    if response is not None and response.charset:
        return response.charset
    return default


class XferTransformInputStreamString(XferTransform[BinaryIO, str]):
    """Body stream -> text, decoded with the response charset (UTF-8 by default)."""

    INSTANCE: 'XferTransformInputStreamString'

    def transform_data(self, data, request):
        raw = data.read()
        charset = response_charset(request)
        try:
            return raw.decode(charset)
        except LookupError:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParserError(f"Bad text data: {e.reason}", source_data=raw, request=request) from e


XferTransformInputStreamString.INSTANCE = XferTransformInputStreamString()
