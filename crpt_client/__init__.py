"""Rate-limited create-document API client."""

from crpt_client.providers.models import Description, Document, DocumentResponse, Product
from crpt_client.runtime.dispatch import ConfigurationError, DispatchEngine, RateWindow
from crpt_client.services.document_service import CrptApi, TimeUnit

__all__ = [
    "ConfigurationError",
    "CrptApi",
    "Description",
    "DispatchEngine",
    "Document",
    "DocumentResponse",
    "Product",
    "RateWindow",
    "TimeUnit",
]
