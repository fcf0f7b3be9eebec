from __future__ import annotations

from skillsession.infra.storage.document_store import (
    DocumentStore,
    Filter,
    InMemoryDocumentStore,
    ScanPage,
    scan_all,
)
from skillsession.settings import Settings


def build_document_store(settings: Settings) -> DocumentStore:
    """Store selected by DB_BACKEND; backend libraries load only when picked."""
    key_fields = settings.tables.key_fields()

    if settings.db_backend == "dynamodb":
        from skillsession.infra.storage.dynamo_document_store import (
            DynamoDocumentStore,
            build_dynamodb_resource,
        )

        return DynamoDocumentStore(build_dynamodb_resource(settings.aws_region, settings.dynamodb_endpoint_url))

    if settings.db_backend == "sql":
        from skillsession.infra.db.session import build_session_factory
        from skillsession.infra.storage.sql_document_store import SqlDocumentStore

        return SqlDocumentStore(build_session_factory(settings.database_url), key_fields)

    if settings.db_backend == "memory":
        return InMemoryDocumentStore(key_fields)

    raise ValueError(f"Unknown DB_BACKEND '{settings.db_backend}' (expected memory, sql or dynamodb)")


__all__ = [
    "DocumentStore",
    "Filter",
    "InMemoryDocumentStore",
    "ScanPage",
    "build_document_store",
    "scan_all",
]
