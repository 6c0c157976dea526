"""Document schema and normalized response models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

ResponseCode = Literal[
    "CLIENT_CLOSED",
    "INVALID_PARAMS",
    "REQUEST_LIMIT_EXCEEDED",
    "NETWORK_ERROR",
    "ENCODE_ERROR",
    "DECODE_ERROR",
    "INTERNAL_ERROR",
]


def _drop_none(values: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


@dataclass
class Description:
    participant_inn: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({"participantInn": self.participant_inn})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Description:
        return cls(participant_inn=data.get("participantInn"))


@dataclass
class Product:
    certificate_document: str | None = None
    certificate_document_date: str | None = None
    certificate_document_number: str | None = None
    owner_inn: str | None = None
    producer_inn: str | None = None
    production_date: str | None = None
    tnved_code: str | None = None
    uit_code: str | None = None
    uitu_code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "certificate_document": self.certificate_document,
                "certificate_document_date": self.certificate_document_date,
                "certificate_document_number": self.certificate_document_number,
                "owner_inn": self.owner_inn,
                "producer_inn": self.producer_inn,
                "production_date": self.production_date,
                "tnved_code": self.tnved_code,
                "uit_code": self.uit_code,
                "uitu_code": self.uitu_code,
            }
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Product:
        return cls(
            certificate_document=data.get("certificate_document"),
            certificate_document_date=data.get("certificate_document_date"),
            certificate_document_number=data.get("certificate_document_number"),
            owner_inn=data.get("owner_inn"),
            producer_inn=data.get("producer_inn"),
            production_date=data.get("production_date"),
            tnved_code=data.get("tnved_code"),
            uit_code=data.get("uit_code"),
            uitu_code=data.get("uitu_code"),
        )


@dataclass
class Document:
    """Goods introduction document submitted to the create-document endpoint."""

    description: Description | None = None
    doc_id: str | None = None
    doc_status: str | None = None
    doc_type: str | None = None
    import_request: bool | None = None
    owner_inn: str | None = None
    participant_inn: str | None = None
    producer_inn: str | None = None
    production_date: str | None = None
    production_type: str | None = None
    products: list[Product] | None = None
    reg_date: str | None = None
    reg_number: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the wire representation with unset fields omitted."""
        return _drop_none(
            {
                "description": self.description.to_dict() if self.description is not None else None,
                "doc_id": self.doc_id,
                "doc_status": self.doc_status,
                "doc_type": self.doc_type,
                "importRequest": self.import_request,
                "owner_inn": self.owner_inn,
                "participant_inn": self.participant_inn,
                "producer_inn": self.producer_inn,
                "production_date": self.production_date,
                "production_type": self.production_type,
                "products": [product.to_dict() for product in self.products] if self.products is not None else None,
                "reg_date": self.reg_date,
                "reg_number": self.reg_number,
            }
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Document:
        description = data.get("description")
        products = data.get("products")
        return cls(
            description=Description.from_dict(description) if isinstance(description, dict) else None,
            doc_id=data.get("doc_id"),
            doc_status=data.get("doc_status"),
            doc_type=data.get("doc_type"),
            import_request=data.get("importRequest"),
            owner_inn=data.get("owner_inn"),
            participant_inn=data.get("participant_inn"),
            producer_inn=data.get("producer_inn"),
            production_date=data.get("production_date"),
            production_type=data.get("production_type"),
            products=(
                [Product.from_dict(item) for item in products if isinstance(item, dict)]
                if isinstance(products, list)
                else None
            ),
            reg_date=data.get("reg_date"),
            reg_number=data.get("reg_number"),
        )


@dataclass(frozen=True)
class DocumentRequest:
    """Fully packaged HTTP request handed to the sender."""

    url: str
    body: bytes
    headers: dict[str, str] = field(default_factory=dict)


@dataclass
class DocumentResponse:
    value: str | None = None
    code: str | None = None
    error_message: str | None = None
    description: str | None = None

    @property
    def is_success(self) -> bool:
        return self.value is not None and self.code is None

    @property
    def is_error(self) -> bool:
        return self.code is not None

    @classmethod
    def success(cls, value: str) -> DocumentResponse:
        return cls(value=value)

    @classmethod
    def failure(cls, code: str, error_message: str, description: str | None = None) -> DocumentResponse:
        return cls(code=code, error_message=error_message, description=description)

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "value": self.value,
                "code": self.code,
                "error_message": self.error_message,
                "description": self.description,
            }
        )
