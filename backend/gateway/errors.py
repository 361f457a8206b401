"""Client-input errors raised while parsing a command.

Each error carries the HTTP status it maps to; the handler in
error_handlers.py renders it as ``{"message": ...}``.
"""

from typing import Dict


class GatewayError(Exception):
    def __init__(self, message: str, http_status: int = 400):
        super().__init__(message)
        self.message = message
        self.http_status = http_status

    def to_response(self) -> Dict[str, str]:
        return {"message": self.message}


class InvalidOperation(GatewayError):
    """The ``operation`` field names no supported command."""

    def __init__(self):
        super().__init__("Invalid operation", 404)


class MissingUpdate(GatewayError):
    """findAndModify was sent without an ``update`` field."""

    def __init__(self):
        super().__init__("update field is required", 400)


class InvalidCommand(GatewayError):
    """The command body has the wrong shape for its operation."""

    def __init__(self, message: str):
        super().__init__(message, 400)
