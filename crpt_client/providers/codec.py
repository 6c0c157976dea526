"""JSON codec and create-document request packaging."""

from __future__ import annotations

import base64
import json
from typing import Any
from urllib.parse import urlencode

from crpt_client.providers.models import Document, DocumentRequest

DOCUMENT_FORMAT = "MANUAL"
DOCUMENT_TYPE = "LP_INTRODUCE_GOODS"
PRODUCT_GROUPS: dict[int, str] = {
    1: "clothes",
    2: "shoes",
    3: "tobacco",
    4: "perfumery",
    5: "tires",
    6: "electronics",
    7: "pharma",
    8: "milk",
    9: "bicycle",
    10: "wheelchairs",
}


class EncodeError(Exception):
    """Payload could not be serialized to JSON."""


class DecodeError(Exception):
    """Response body could not be parsed as JSON."""


class JsonCodec:
    def encode(self, payload: Any) -> bytes:
        if isinstance(payload, Document):
            payload = payload.to_dict()
        try:
            return json.dumps(payload, ensure_ascii=False, allow_nan=False).encode("utf-8")
        except (TypeError, ValueError) as error:
            raise EncodeError(str(error)) from error

    def decode(self, raw: bytes | str) -> Any:
        try:
            return json.loads(raw)
        except (TypeError, ValueError) as error:
            raise DecodeError(str(error)) from error


def product_group(code: int | None) -> str | None:
    if code is None:
        return None
    return PRODUCT_GROUPS.get(code)


def build_document_request(
    api_url: str,
    document: Document,
    product_group_code: int | None,
    signature: str,
    token: str,
    codec: JsonCodec | None = None,
) -> DocumentRequest:
    """Package a document as the create-document request body.

    The document JSON travels base64-encoded in ``product_document``; the product
    group, when known, is sent both in the body and as the ``pg`` query parameter.
    Raises EncodeError if either the document or the envelope cannot be serialized.
    """
    codec = codec or JsonCodec()
    document_base64 = base64.b64encode(codec.encode(document)).decode("ascii")
    group = product_group(product_group_code)

    envelope: dict[str, Any] = {
        "document_format": DOCUMENT_FORMAT,
        "product_document": document_base64,
        "signature": signature,
        "type": DOCUMENT_TYPE,
    }
    url = api_url
    if group is not None:
        envelope["product_group"] = group
        url = f"{api_url}?{urlencode({'pg': group})}"

    return DocumentRequest(
        url=url,
        body=codec.encode(envelope),
        headers={
            "Content-Type": "application/json",
            "Authorization": f"Bearer {token}",
        },
    )
