# SPDX-License-Identifier: Apache-2.0

"""
Error kinds raised by the relief registry.

Every registry operation either applies all of its state changes or raises one
of these before touching any state. Each error carries a stable ``error_type``
slug and the HTTP status the API layer reports it with.
"""


class RegistryError(Exception):
    """Base class for all registry failures."""

    error_type = "registry-error"
    title = "Registry Error"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Unauthorized(RegistryError):
    """Caller lacks the coordinator privilege."""

    error_type = "unauthorized"
    title = "Unauthorized"
    status_code = 403


class ValidationError(RegistryError):
    """Malformed input: empty text, severity out of range, non-positive quantity."""

    error_type = "validation-error"
    title = "Validation Error"
    status_code = 400

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.field = field


class InvalidAmount(ValidationError):
    """Monetary amount is not strictly positive."""

    error_type = "invalid-amount"
    title = "Invalid Amount"

    def __init__(self, message: str = "Amount must be greater than zero"):
        super().__init__(message, field="amount")


class InvalidDisaster(RegistryError):
    """Disaster id out of range, or disaster not active when activity is required."""

    error_type = "invalid-disaster"
    title = "Invalid Disaster"
    status_code = 409


class NotRegistered(RegistryError):
    error_type = "not-registered"
    title = "Worker Not Registered"
    status_code = 404


class NotAvailable(RegistryError):
    error_type = "not-available"
    title = "Worker Not Available"
    status_code = 409


class AlreadyAvailable(RegistryError):
    error_type = "already-available"
    title = "Worker Already Available"
    status_code = 409


class AlreadyClosed(RegistryError):
    error_type = "already-closed"
    title = "Disaster Already Closed"
    status_code = 409


class InsufficientFunds(RegistryError):
    error_type = "insufficient-funds"
    title = "Insufficient Funds"
    status_code = 409


class RecordNotFound(RegistryError):
    """Lookup of a disaster, resource or worker record that does not exist."""

    error_type = "record-not-found"
    title = "Record Not Found"
    status_code = 404
