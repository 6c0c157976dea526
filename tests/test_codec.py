import base64
import json

import pytest

from crpt_client.providers.codec import DecodeError, EncodeError, JsonCodec, build_document_request, product_group
from crpt_client.providers.models import Document, DocumentResponse, Product


def test_encode_uses_wire_names_and_drops_unset_fields() -> None:
    document = Document(
        doc_id="DOC1",
        import_request=True,
        products=[Product(uit_code="010460", tnved_code="6401")],
    )
    encoded = json.loads(JsonCodec().encode(document))
    assert encoded == {
        "doc_id": "DOC1",
        "importRequest": True,
        "products": [{"tnved_code": "6401", "uit_code": "010460"}],
    }


def test_encode_rejects_unserializable_payload() -> None:
    with pytest.raises(EncodeError):
        JsonCodec().encode({"when": object()})
    with pytest.raises(EncodeError):
        JsonCodec().encode({"ratio": float("nan")})


def test_decode_rejects_invalid_json() -> None:
    assert JsonCodec().decode(b'{"value": "ok"}') == {"value": "ok"}
    with pytest.raises(DecodeError):
        JsonCodec().decode("invalid json")


def test_product_group_mapping() -> None:
    assert product_group(1) == "clothes"
    assert product_group(8) == "milk"
    assert product_group(10) == "wheelchairs"
    assert product_group(0) is None
    assert product_group(11) is None
    assert product_group(None) is None


def test_build_request_without_known_group_omits_group() -> None:
    request = build_document_request("https://example.test/create", Document(doc_id="D"), 42, "sig", "tok")
    body = json.loads(request.body)
    assert request.url == "https://example.test/create"
    assert "product_group" not in body
    assert json.loads(base64.b64decode(body["product_document"])) == {"doc_id": "D"}


def test_document_from_dict_reads_wire_names() -> None:
    document = Document.from_dict(
        {
            "doc_id": "DOC9",
            "importRequest": False,
            "description": {"participantInn": "77"},
            "products": [{"uit_code": "U1"}, "skipped"],
        }
    )
    assert document.doc_id == "DOC9"
    assert document.import_request is False
    assert document.description is not None and document.description.participant_inn == "77"
    assert document.products == [Product(uit_code="U1")]


def test_document_response_flags() -> None:
    assert DocumentResponse.success("ok").is_success
    failure = DocumentResponse.failure("500", "HTTP Error 500", "boom")
    assert failure.is_error and not failure.is_success
    assert failure.to_dict() == {"code": "500", "error_message": "HTTP Error 500", "description": "boom"}
