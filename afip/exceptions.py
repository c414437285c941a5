# Copyright (c) 2024, Digital Consulting Service LLC (Mongolia)
# License: GNU General Public License v3
"""
AFIP Exception Hierarchy

Provides a consistent exception hierarchy for AFIP web service calls.
All custom exceptions inherit from AFIPError for easy catching.

Taxonomy:
- AFIPServiceError: business rejection reported inside a SOAP response
  (numeric code + message), including rejections built from voucher
  observations.
- AFIPSoapFault: rejection delivered as a SOAP fault (the taxpayer
  registry reports most errors this way).
- AFIPTransportError: network, protocol or malformed response failures.
"""

from __future__ import annotations

from typing import Any


class AFIPError(Exception):
    """Base exception for all AFIP errors.

    Example:
        try:
            await client.create_voucher(data)
        except AFIPError as e:
            handle_afip_error(e)
    """

    def __init__(self, message: str, code: Any = None, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        if self.code is not None:
            return f"({self.code}) {self.message}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "details": self.details
        }


class AFIPServiceError(AFIPError):
    """Business rule rejection reported by AFIP.

    Raised when an otherwise successful SOAP response carries an
    ``Errors`` list, or when a voucher is not approved and comes back
    with observations.

    Attributes:
        code: Numeric AFIP error code (e.g. 602 "Sin Resultados")
        response_data: Operation result the error was found in
    """

    def __init__(self, message: str, code: Any = None, response_data: Any = None):
        super().__init__(message, code)
        self.response_data = response_data


class AFIPSoapFault(AFIPServiceError):
    """SOAP fault returned by an AFIP service.

    ``code`` holds the fault code (e.g. ``soap:Server``), not a number.
    """
    pass


class AFIPTransportError(AFIPError):
    """Network/protocol error talking to AFIP.

    Attributes:
        status_code: HTTP status code when one was received
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AFIPAuthError(AFIPError):
    """No valid token/sign could be obtained for a service."""
    pass


class AFIPConfigError(AFIPError):
    """Required settings are missing or invalid."""
    pass


__all__ = [
    "AFIPError",
    "AFIPServiceError",
    "AFIPSoapFault",
    "AFIPTransportError",
    "AFIPAuthError",
    "AFIPConfigError",
]
