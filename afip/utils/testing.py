# -*- coding: utf-8 -*-
# Copyright (c) 2024, Digital Consulting Service LLC (Mongolia)
# License: GNU General Public License v3

"""
Test Utilities for AFIP

Provides mock transports, test data factories and assertion helpers.
"""

import copy
from types import SimpleNamespace
from typing import Any

from afip.api.auth import Credential


class MockTransport:
    """
    Mock SOAP transport for testing.

    Usage:
        soap = MockTransport()
        soap.set_response("FECompUltimoAutorizado", {"FECompUltimoAutorizadoResult": {"CbteNro": 10}})

        client = ElectronicBillingClient(settings, soap=soap, auth=auth)
        assert await client.get_last_voucher(1, 6) == 10
    """

    def __init__(self):
        self._responses: dict[str, Any] = {}
        self._calls: dict[str, list] = {}
        self.closed = False

    def set_response(self, operation: str, response: Any):
        self._responses[operation] = response

    def set_error(self, operation: str, error: Exception):
        self._responses[operation] = error

    def call_count(self, operation: str) -> int:
        return len(self._calls.get(operation, []))

    def get_calls(self, operation: str) -> list:
        return self._calls.get(operation, [])

    def last_params(self, operation: str) -> dict:
        return self._calls[operation][-1]

    async def execute(self, operation: str, params: dict | None = None):
        # Snapshot so later mutations by the caller don't rewrite history
        self._calls.setdefault(operation, []).append(copy.deepcopy(params))

        response = self._responses.get(operation)
        if isinstance(response, Exception):
            raise response
        if response is None:
            return {f"{operation}Result": {}}
        return copy.deepcopy(response)

    async def close(self):
        self.closed = True


class MockAuth:
    """Auth delegate returning a fixed ticket and counting requests"""

    def __init__(self, token: str = "test-token", sign: str = "test-sign"):
        self.token = token
        self.sign = sign
        self.requested: list[str] = []

    async def get_credential(self, service: str):
        self.requested.append(service)
        return Credential(token=self.token, sign=self.sign, service=service)


# Test data factories

def make_settings(
    enabled: bool = True,
    environment: str = "Testing",
    cuit: str = "20111111112",
    timeout: int = 30,
    debug_mode: bool = False
) -> SimpleNamespace:
    """Create a settings object with AFIP Settings fields"""
    return SimpleNamespace(
        enabled=enabled,
        environment=environment,
        cuit=cuit,
        timeout=timeout,
        debug_mode=debug_mode
    )


def make_voucher_data(**kwargs) -> dict:
    """Create test voucher data (Factura B, one unit)"""
    data = {
        "CantReg": 1,
        "PtoVta": 1,
        "CbteTipo": 6,
        "Concepto": 1,
        "DocTipo": 99,
        "DocNro": 0,
        "CbteDesde": 1,
        "CbteHasta": 1,
        "CbteFch": 20230415,
        "ImpTotal": 121,
        "ImpTotConc": 0,
        "ImpNeto": 100,
        "ImpOpEx": 0,
        "ImpIVA": 21,
        "ImpTrib": 0,
        "MonId": "PES",
        "MonCotiz": 1,
        "Iva": [
            {"Id": 5, "BaseImp": 100, "Importe": 21}
        ]
    }
    data.update(kwargs)
    return data


def make_cae_response(
    cae: str = "73151234567890",
    expiration: str = "20230425",
    result: str = "A",
    observations: list | None = None,
    as_list: bool = True
) -> dict:
    """Create mock FECAESolicitar response"""
    detail: dict[str, Any] = {
        "Concepto": 1,
        "DocTipo": 99,
        "DocNro": 0,
        "CbteDesde": 1,
        "CbteHasta": 1,
        "CbteFch": "20230415",
        "Resultado": result,
        "Observaciones": {"Obs": observations} if observations else None,
        "CAE": cae if result == "A" else None,
        "CAEFchVto": expiration if result == "A" else None
    }

    return {
        "FECAESolicitarResult": {
            "FeCabResp": {
                "Cuit": 20111111112,
                "PtoVta": 1,
                "CbteTipo": 6,
                "FchProceso": "20230415120000",
                "CantReg": 1,
                "Resultado": result,
                "Reproceso": "N"
            },
            "FeDetResp": {
                "FECAEDetResponse": [detail] if as_list else detail
            },
            "Events": None,
            "Errors": None
        }
    }


def make_error_response(operation: str, *errors: tuple) -> dict:
    """Create mock response carrying Errors.Err entries as (code, message)"""
    return {
        f"{operation}Result": {
            "Errors": {
                "Err": [{"Code": code, "Msg": message} for code, message in errors]
            }
        }
    }


# Assertion helpers

def assert_operation_called(soap: MockTransport, operation: str, times: int = 1):
    actual = soap.call_count(operation)
    assert actual == times, f"Expected {operation} to be called {times} times, got {actual}"
