"""Scheduled entry point: one expiry sweep over the slots table, summary on stdout."""

from __future__ import annotations

import json
import logging
import sys
from typing import Optional

from skillsession.infra.repositories import SlotRepository
from skillsession.infra.storage import DocumentStore, build_document_store
from skillsession.logging import configure_logging
from skillsession.services.errors import StorageError
from skillsession.services.expiry_service import ExpiryService
from skillsession.settings import Settings, load_settings

logger = logging.getLogger(__name__)


def run(settings: Settings, store: Optional[DocumentStore] = None) -> dict:
    store = store if store is not None else build_document_store(settings)
    service = ExpiryService(
        SlotRepository(store, settings.tables.slots, page_size=settings.scan_page_size),
        tz=settings.tzinfo,
    )
    result = service.sweep()
    return {"message": "Expired slots processed successfully", "results": result.as_dict()}


def main() -> int:
    settings = load_settings()
    configure_logging(debug=settings.debug)
    logger.info("Starting expired slots cron job")

    try:
        summary = run(settings)
    except StorageError as exc:
        logger.error("Cron job failed: %s", exc)
        print(json.dumps({"message": "Error processing expired slots", "error": str(exc)}))
        return 1

    print(json.dumps(summary))
    return 0


if __name__ == "__main__":
    sys.exit(main())
