"""Thread-safe create-document client with a fixed-window request limit."""

from __future__ import annotations

import json
import logging
import time
from concurrent.futures import Future
from enum import Enum
from typing import Any

import requests

from crpt_client.config.settings import DEFAULT_API_URL
from crpt_client.providers.codec import DecodeError, EncodeError, JsonCodec, build_document_request
from crpt_client.providers.http import HTTP_CREATED, HttpSender, TransportError
from crpt_client.providers.models import Document, DocumentResponse, ResponseCode
from crpt_client.runtime.dispatch import (
    DEFAULT_GRACE_SECONDS,
    DEFAULT_QUEUE_LIMIT,
    ConfigurationError,
    DispatchEngine,
    FailureKind,
    RateWindow,
    completed,
)
from crpt_client.runtime.monitoring import DispatchSnapshot

LOGGER = logging.getLogger(__name__)


class TimeUnit(Enum):
    MILLISECONDS = 0.001
    SECONDS = 1.0
    MINUTES = 60.0
    HOURS = 3600.0
    DAYS = 86400.0

    @property
    def seconds(self) -> float:
        return float(self.value)

    @classmethod
    def parse(cls, name: str) -> TimeUnit:
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ConfigurationError(f"Unknown time unit: {name!r}.") from None


_FAILURE_DESCRIPTIONS: dict[str, str] = {
    "CLIENT_CLOSED": "API client is closed",
    "INVALID_PARAMS": "Required parameters must not be null",
    "REQUEST_LIMIT_EXCEEDED": "Request queue limit exceeded",
    "NETWORK_ERROR": "Network error",
    "ENCODE_ERROR": "Invalid request JSON structure",
    "DECODE_ERROR": "Invalid response JSON structure",
    "INTERNAL_ERROR": "Internal error",
}


def failure_response(code: ResponseCode, message: str) -> DocumentResponse:
    return DocumentResponse.failure(code, message, _FAILURE_DESCRIPTIONS.get(code, message))


def _engine_failure(kind: FailureKind, message: str) -> DocumentResponse:
    return failure_response(kind, message)


def classify_response(status_code: int, body: str, codec: JsonCodec) -> DocumentResponse:
    """Map an HTTP status and body to a DocumentResponse.

    A 201 body is decoded into the response fields. Any other status is reported
    with code, error_message and description taken from a JSON body when present,
    falling back to the numeric status, ``HTTP Error <status>`` and the raw body.
    """
    if status_code == HTTP_CREATED:
        try:
            data = codec.decode(body)
        except DecodeError as error:
            return failure_response("DECODE_ERROR", f"Failed to parse JSON response: {error}")
        if not isinstance(data, dict):
            return failure_response("DECODE_ERROR", "Failed to parse JSON response: expected an object.")
        return DocumentResponse(
            value=_as_text(data.get("value")),
            code=_as_text(data.get("code")),
            error_message=_as_text(data.get("error_message")),
            description=_as_text(data.get("description")),
        )

    try:
        data = codec.decode(body)
    except DecodeError:
        data = None
    if not isinstance(data, dict):
        return DocumentResponse.failure(str(status_code), f"HTTP Error {status_code}", body)
    return DocumentResponse.failure(
        _as_text(data.get("code")) or str(status_code),
        _as_text(data.get("error_message")) or f"HTTP Error {status_code}",
        _as_text(data.get("description")) or body,
    )


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)


class CrptApi:
    """Submits documents to the create-document endpoint, ``request_limit`` per time unit.

    ``create_document`` never blocks and never raises; it returns a Future that
    resolves to a DocumentResponse. Use as a context manager or call ``shutdown``.
    """

    def __init__(
        self,
        time_unit: TimeUnit | None,
        request_limit: int,
        api_url: str = DEFAULT_API_URL,
        sender: Any | None = None,
        codec: JsonCodec | None = None,
        queue_limit: int = DEFAULT_QUEUE_LIMIT,
        grace_seconds: float = DEFAULT_GRACE_SECONDS,
        request_timeout_seconds: float = 30.0,
        connect_timeout_seconds: float = 10.0,
    ) -> None:
        if time_unit is None:
            raise ConfigurationError("Time unit must not be None.")
        window = RateWindow(limit=request_limit, interval_seconds=time_unit.seconds)
        # Built before the sender so a rejected configuration opens no session.
        self._engine: DispatchEngine[DocumentResponse] = DispatchEngine(
            window=window,
            failure=_engine_failure,
            queue_limit=queue_limit,
            grace_seconds=grace_seconds,
            name="crpt-api",
        )
        self.api_url = api_url
        self.codec = codec or JsonCodec()
        self.sender = sender or HttpSender(
            timeout_seconds=request_timeout_seconds,
            connect_timeout_seconds=connect_timeout_seconds,
        )
        self._owns_sender = sender is None

    @classmethod
    def from_settings(cls, settings: Any, sender: Any | None = None) -> CrptApi:
        return cls(
            TimeUnit.parse(settings.time_unit),
            settings.request_limit,
            api_url=settings.api_url,
            sender=sender,
            queue_limit=settings.request_queue_limit,
            grace_seconds=settings.shutdown_grace_seconds,
            request_timeout_seconds=settings.request_timeout_seconds,
            connect_timeout_seconds=settings.connect_timeout_seconds,
        )

    @property
    def closed(self) -> bool:
        return self._engine.closed

    def create_document(
        self,
        document: Document | None,
        product_group_code: int | None,
        signature: str | None,
        token: str | None,
    ) -> Future:
        if self._engine.closed:
            self._engine.metrics.record_rejected("CLIENT_CLOSED")
            return completed(failure_response("CLIENT_CLOSED", "API client was closed."))
        if document is None or signature is None or token is None:
            self._engine.metrics.record_rejected("INVALID_PARAMS")
            return completed(failure_response("INVALID_PARAMS", "Required parameters must not be null."))
        return self._engine.submit(self._send, document, product_group_code, signature, token)

    def stats(self) -> DispatchSnapshot:
        return self._engine.stats()

    def shutdown(self) -> None:
        if self._engine.shutdown() and self._owns_sender:
            self.sender.close()

    def close(self) -> None:
        self.shutdown()

    def __enter__(self) -> CrptApi:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    def _send(
        self,
        document: Document,
        product_group_code: int | None,
        signature: str,
        token: str,
    ) -> DocumentResponse:
        try:
            request = build_document_request(
                self.api_url,
                document,
                product_group_code,
                signature,
                token,
                codec=self.codec,
            )
        except EncodeError as error:
            LOGGER.warning("document encoding failed: doc_id=%s error=%s", document.doc_id, error)
            return failure_response("ENCODE_ERROR", f"Failed to build JSON request: {error}")

        started = time.perf_counter()
        try:
            response = self.sender.send(request)
        except (TransportError, requests.RequestException) as error:
            LOGGER.warning(
                "document submission failed: doc_id=%s url=%s error=%s",
                document.doc_id,
                request.url,
                error,
            )
            return failure_response("NETWORK_ERROR", f"HTTP request failed: {error}")

        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
        result = classify_response(response.status_code, response.text or "", self.codec)
        LOGGER.info(
            "document submitted: doc_id=%s status=%s success=%s latency_ms=%s",
            document.doc_id,
            response.status_code,
            result.is_success,
            elapsed_ms,
        )
        return result
