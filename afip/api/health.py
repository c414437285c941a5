# -*- coding: utf-8 -*-
# pyright: reportMissingImports=false
# Copyright (c) 2024, Digital Consulting Service LLC (Mongolia)
# License: GNU General Public License v3

"""
Health Check API for AFIP

Provides endpoints for monitoring AFIP app health and AFIP server status.
"""

import asyncio
import time
from datetime import datetime
from typing import Any

import frappe

from afip.api.electronic_billing import ElectronicBillingClient
from afip.api.register_scope_four import RegisterScopeFourClient
from afip.exceptions import AFIPError
from afip.logger import log_error


@frappe.whitelist(allow_guest=True)
def health():
    """
    Basic health check endpoint.

    Returns:
        dict: Health status with timestamp
    """
    return {
        "status": "healthy",
        "app": "afip",
        "timestamp": datetime.utcnow().isoformat() + "Z"
    }


@frappe.whitelist()
def check_server_status():
    """
    Ask both AFIP services for their server status.

    Requires System Manager. Status calls carry no access ticket.
    """
    frappe.only_for(["System Manager", "Administrator"])

    settings = frappe.get_single("AFIP Settings")
    if not getattr(settings, "enabled", False):
        return {"status": "disabled", "timestamp": datetime.utcnow().isoformat() + "Z"}

    checks = asyncio.run(get_server_status(settings))

    all_healthy = all(c.get("status") == "healthy" for c in checks.values())
    return {
        "status": "healthy" if all_healthy else "degraded",
        "environment": settings.environment,
        "checks": checks,
        "timestamp": datetime.utcnow().isoformat() + "Z"
    }


async def get_server_status(settings) -> dict[str, Any]:
    """Run the status call of every AFIP service concurrently"""
    clients = {
        "wsfe": ElectronicBillingClient(settings),
        "ws_sr_padron_a4": RegisterScopeFourClient(settings),
    }

    try:
        results = await asyncio.gather(*(check_service(client) for client in clients.values()))
    finally:
        for client in clients.values():
            await client.close()

    return dict(zip(clients, results))


async def check_service(client) -> dict[str, Any]:
    """Call get_server_status on one client and time it"""
    start_time = time.monotonic()
    try:
        servers = await client.get_server_status()
    except AFIPError as e:
        log_error(f"AFIP status check failed: {client.SERVICE}", {"error": str(e)}, exc=e, persist=True)
        return {"status": "unhealthy", "error": str(e)}

    response_time_ms = round((time.monotonic() - start_time) * 1000, 2)

    # wsfe answers AppServer/DbServer/AuthServer, padron appserver/dbserver/authserver
    all_ok = all(str(value).upper() == "OK" for value in (servers or {}).values())
    return {
        "status": "healthy" if servers and all_ok else "unhealthy",
        "servers": servers,
        "response_time_ms": response_time_ms
    }
