"""Command-line entrypoint: submit one document through the rate-limited client."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from concurrent.futures import TimeoutError as FutureTimeoutError
from pathlib import Path

from crpt_client.config.settings import Settings, get_settings
from crpt_client.providers.models import Document
from crpt_client.runtime.dispatch import ConfigurationError
from crpt_client.services.document_service import CrptApi

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="crpt-submit", description="Submit a document to the create-document API.")
    parser.add_argument("document", type=Path, help="Path to the document JSON file.")
    parser.add_argument("--group", type=int, default=None, help="Product group code (1-10).")
    parser.add_argument("--signature", default=None, help="Document signature (defaults to CRPT_SIGNATURE).")
    parser.add_argument("--token", default=None, help="Bearer token (defaults to CRPT_TOKEN).")
    parser.add_argument("--timeout", type=float, default=60.0, help="Seconds to wait for the response.")
    return parser


def load_document(path: Path) -> Document:
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError(f"Expected a JSON object in {path}, got {type(raw).__name__}.")
    return Document.from_dict(raw)


def run(argv: list[str] | None = None, settings: Settings | None = None, sender: object | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    try:
        document = load_document(args.document)
    except (OSError, ValueError) as error:
        print(f"Error: cannot load document: {error}", file=sys.stderr)
        return 2

    try:
        api = CrptApi.from_settings(settings, sender=sender)
    except ConfigurationError as error:
        print(f"Error: invalid configuration: {error}", file=sys.stderr)
        return 2

    with api:
        future = api.create_document(
            document,
            args.group,
            args.signature or settings.signature,
            args.token or settings.token,
        )
        try:
            response = future.result(timeout=args.timeout)
        except FutureTimeoutError:
            LOGGER.error("no response within %.1fs: doc_id=%s", args.timeout, document.doc_id)
            future.cancel()
            return 1

    print(json.dumps(response.to_dict(), ensure_ascii=False))
    return 0 if response.is_success else 1


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
