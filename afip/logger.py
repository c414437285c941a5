# pyright: reportMissingImports=false
"""
AFIP Logging Utilities

Provides standardized logging for AFIP web service calls using Frappe's
logging infrastructure. Logs are stored in:
- afip.log file (debug/info/warning/error)
- Error Log DocType (only for errors logged with persist=True)

Token and sign values are never written to the log.
"""

import json
import traceback
from typing import Any, Dict, Optional

import frappe


REDACTED_KEYS = {"Auth", "token", "sign", "Token", "Sign"}


def get_logger():
    """Get AFIP logger instance."""
    return frappe.logger("afip", allow_site=True, file_count=10)


def _format(message: str, data: Optional[Dict] = None) -> str:
    if data:
        return f"{message} | Data: {json.dumps(data, default=str)}"
    return message


def log_info(message: str, data: Optional[Dict] = None):
    """
    Log info level message.

    Args:
        message: Log message
        data: Optional additional data to log
    """
    get_logger().info(_format(message, data))


def log_debug(message: str, data: Optional[Dict] = None):
    """Log debug level message."""
    get_logger().debug(_format(message, data))


def log_warning(message: str, data: Optional[Dict] = None):
    """Log warning level message."""
    get_logger().warning(_format(message, data))


def log_error(message: str, data: Optional[Dict] = None, exc: Optional[Exception] = None, persist: bool = False):
    """
    Log error to file and, when persist is set, to the Error Log DocType.

    Args:
        message: Error message
        data: Optional additional data
        exc: Optional exception object
        persist: Also create an Error Log entry (needs a database connection)
    """
    error_details = {
        "message": message,
        "data": data,
        "traceback": traceback.format_exc() if exc else None
    }

    get_logger().error(f"{message} | Details: {json.dumps(error_details, default=str)}")

    if persist:
        frappe.log_error(
            message=json.dumps(error_details, default=str, indent=2),
            title=f"AFIP: {message[:100]}"
        )


def redact(params: Any) -> Any:
    """Return a copy of a SOAP parameter tree with credentials masked."""
    if isinstance(params, dict):
        return {
            key: "***" if key in REDACTED_KEYS else redact(value)
            for key, value in params.items()
        }
    if isinstance(params, list):
        return [redact(item) for item in params]
    return params


def log_api_call(
    service: str,
    operation: str,
    request_data: Optional[Dict] = None,
    status: str = "Success",
    error_message: Optional[str] = None,
    execution_time: Optional[float] = None
):
    """
    Log a SOAP operation call.

    Args:
        service: AFIP service name (wsfe, ws_sr_padron_a4)
        operation: SOAP operation called
        request_data: Request parameters (credentials are redacted)
        status: Success/Rejected/Failed
        error_message: Error message if the call did not succeed
        execution_time: Time taken in seconds
    """
    data: Dict[str, Any] = {
        "status": status,
        "execution_time": execution_time,
    }
    if request_data is not None:
        data["request"] = redact(request_data)
    if error_message:
        data["error"] = error_message

    message = f"SOAP Call: {service}.{operation}"
    if status == "Success":
        log_debug(message, data)
    elif status == "Rejected":
        log_warning(message, data)
    else:
        log_error(message, data)
