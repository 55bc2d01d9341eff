"""Failure categories raised by the tank workflows.

Callers translate these into their own transport responses; the HTTP
routers map ``NotFound`` to 404, ``Conflict`` to 409 and ``InvalidInput``
to 400. ``StorageError`` is left to surface as a server error.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for every failure raised by the workflows."""


class NotFound(DomainError):
    pass


class Conflict(DomainError):
    pass


class InvalidInput(DomainError):
    pass


class TankNotFound(NotFound):
    def __init__(self, tank_id: int):
        super().__init__(f"Tank {tank_id} not found")
        self.tank_id = tank_id


class DuplicateSerialNumber(Conflict):
    def __init__(self, serial_number: str):
        super().__init__(f"A tank with serial number {serial_number} already exists")
        self.serial_number = serial_number


class StorageError(DomainError):
    """A storage adapter failed to complete a write and rolled it back."""
