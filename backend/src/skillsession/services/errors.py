from __future__ import annotations


class ServiceError(Exception):
    """Base class for domain/service layer failures."""


class NotFoundError(ServiceError):
    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} '{identifier}' not found")


class ConflictError(ServiceError):
    """Raised when a write would clash with a record that already exists."""


class InvalidTransitionError(ConflictError):
    def __init__(self, resource: str, identifier: str, current: str, target: str):
        self.resource = resource
        self.identifier = identifier
        self.current = current
        self.target = target
        super().__init__(f"{resource} '{identifier}' cannot move from {current} to {target}")


class StorageError(ServiceError):
    """An operation against the document store failed; the cause is chained."""

    def __init__(self, operation: str, table: str, message: str):
        self.operation = operation
        self.table = table
        super().__init__(f"{operation} on '{table}' failed: {message}")


class ConditionFailedError(ConflictError):
    """A conditional write found the item in a different state than required."""

    def __init__(self, table: str, key: object, condition: object):
        self.table = table
        self.key = key
        self.condition = condition
        super().__init__(f"conditional write on '{table}' {key} rejected: {condition}")
