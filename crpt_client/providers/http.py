"""HTTP sender and normalized transport errors."""

from __future__ import annotations

from dataclasses import dataclass

import requests
from requests.adapters import HTTPAdapter

from crpt_client.providers.models import DocumentRequest

HTTP_CREATED = 201


@dataclass
class TransportError(Exception):
    message: str
    url: str | None = None

    def __str__(self) -> str:
        return self.message


def _build_session() -> requests.Session:
    session = requests.Session()
    session.mount("https://", HTTPAdapter(pool_connections=4, pool_maxsize=4))
    session.mount("http://", HTTPAdapter(pool_connections=4, pool_maxsize=4))
    return session


class HttpSender:
    """Blocking POST sender used by the execution lane."""

    def __init__(
        self,
        timeout_seconds: float = 30.0,
        connect_timeout_seconds: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.connect_timeout_seconds = connect_timeout_seconds
        self._session = session or _build_session()

    def send(self, request: DocumentRequest) -> requests.Response:
        try:
            return self._session.post(
                request.url,
                data=request.body,
                headers=request.headers,
                timeout=(self.connect_timeout_seconds, self.timeout_seconds),
            )
        except requests.RequestException as error:
            raise TransportError(f"HTTP request failed: {error}", request.url) from error

    def close(self) -> None:
        self._session.close()
