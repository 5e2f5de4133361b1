"""
Разбор ответа с HTTP ошибкой.

Все, что удалось прочитать из тела ошибки, попадает в ServerErrorBuilder;
ошибки чтения и разбора самого тела отбрасываются (диагностика best-effort),
и в худшем случае ошибка содержит только статус и заголовки.
"""

import gzip
import io
import json
import logging
import zlib
from typing import BinaryIO, Optional, TYPE_CHECKING

import requests
import urllib3

from ..parser.transforms import dump_json
from .exceptions import ParserError, ServerErrorBuilder
from .response import HttpResponse

if TYPE_CHECKING:
    from .request import BaseHttpRequest

logger = logging.getLogger(__name__)

# Ошибки чтения/разбора тела ошибки, которые не должны выйти наружу
DIAGNOSTIC_ERRORS = (
    OSError,
    EOFError,
    ValueError,
    LookupError,
    zlib.error,
    ParserError,
    urllib3.exceptions.HTTPError,
    requests.exceptions.RequestException,
)


def is_json_media_type(media_type: Optional[str]) -> bool:
    """application/json или application/*+json."""
    if not media_type:
        return False
    return media_type == "application/json" or (
        media_type.startswith("application/") and media_type.endswith("+json")
    )


INFLATE_CHUNK_SIZE = 8192


def _inflate(stream: BinaryIO, limit: Optional[int] = None) -> bytes:
    """
    Распаковать deflate тело, не больше `limit` байт на выходе.

    Принимает и zlib поток, и "голый" deflate без заголовка.
    """
    max_length = limit or 0
    chunk = stream.read(INFLATE_CHUNK_SIZE)
    decompressor = zlib.decompressobj()
    try:
        data = decompressor.decompress(chunk, max_length)
    except zlib.error:
        # deflate без zlib заголовка
        decompressor = zlib.decompressobj(-zlib.MAX_WBITS)
        data = decompressor.decompress(chunk, max_length)

    while not decompressor.eof and (limit is None or len(data) < limit):
        chunk = decompressor.unconsumed_tail or stream.read(INFLATE_CHUNK_SIZE)
        if not chunk:
            break
        data += decompressor.decompress(chunk, 0 if limit is None else limit - len(data))
    return data


def get_parseable_error_stream(response: HttpResponse, limit: Optional[int] = None) -> BinaryIO:
    """
    Поток тела ответа, распакованный по Content-Encoding (gzip, deflate).

    Тело читается из соединения лениво; `limit` ограничивает распакованный
    deflate, остальные потоки ограничивает вызывающий через read(limit).

    Raises:
        OSError, zlib.error: тело не удалось прочитать или распаковать
    """
    if response.is_raw_consumed:
        # requests уже прочитал и распаковал тело
        return response.get_content_stream()

    stream = response.get_raw_stream()
    encoding = response.content_encoding
    if encoding == "gzip":
        return gzip.GzipFile(fileobj=stream)
    if encoding == "deflate":
        return io.BytesIO(_inflate(stream, limit))
    return stream


def _read_limited(stream: BinaryIO, limit: int) -> bytes:
    """Не больше `limit` байт; короткие чтения из сети дочитываются."""
    chunks = []
    remaining = limit
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def _read_text(stream: BinaryIO, response: HttpResponse, limit: int) -> str:
    data = _read_limited(stream, limit)
    charset = response.charset or "utf-8"
    try:
        return data.decode(charset, errors="replace")
    except LookupError:
        return data.decode("utf-8", errors="replace")


def new_exception_from_response(
    request: 'BaseHttpRequest',
    response: Optional[HttpResponse],
    cause: Optional[BaseException] = None,
) -> ServerErrorBuilder:
    """
    Собрать ServerErrorBuilder по ответу с ошибкой.

    Порядок:
        1. статус, заголовки, cause
        2. error_parser запроса, если задан
        3. JSON тело -> сообщение = JSON строкой, request.handle_json_error()
        4. text/* или без Content-Type -> сообщение = текст
        5. остальные типы -> тело не читается

    Никогда не бросает исключений из-за тела ответа.

    Example:
        >>> error = new_exception_from_response(request, response).build()
        >>> error.status_code, error.message
        (401, '{"error":"bad token"}')
    """
    builder = ServerErrorBuilder(request)
    builder.set_cause(cause)
    if response is None:
        return builder
    builder.set_http_response(response)

    limit = request.http_config.max_error_body_size
    stream: Optional[BinaryIO] = None
    try:
        if request.error_parser is not None:
            server_error = request.error_parser.transform_data(response, request)
            builder.set_server_error(server_error)
            if isinstance(server_error, str):
                builder.set_error_message(server_error)
            elif server_error is not None:
                builder.set_error_message(str(server_error))
        else:
            media_type = response.media_type
            if is_json_media_type(media_type):
                stream = get_parseable_error_stream(response, limit)
                json_data = json.loads(_read_text(stream, response, limit))
                builder.set_error_message(dump_json(json_data))
                builder.set_server_error(json_data)
                builder = request.handle_json_error(builder, json_data)
            elif media_type is None or media_type.startswith("text/"):
                stream = get_parseable_error_stream(response, limit)
                builder.set_error_message(_read_text(stream, response, limit))
    except DIAGNOSTIC_ERRORS as e:
        logger.debug("Ignoring unparseable error body of %r: %s", request, e)
    finally:
        if stream is not None:
            try:
                stream.close()
            except OSError:
                pass

    return builder
