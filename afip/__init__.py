# -*- coding: utf-8 -*-
# Copyright (c) 2024, Digital Consulting Service LLC (Mongolia)
# License: GNU General Public License v3
# pyright: reportMissingImports=false, reportAttributeAccessIssue=false

"""
AFIP - Argentine Tax Authority Web Services for Frappe

Async clients for AFIP SOAP web services:
- Electronic billing (wsfe v1): CAE vouchers, CAEA, reference data
- Taxpayer registry (ws_sr_padron_a4): taxpayer lookup

Responses are normalized (single-item lists collapsed, compact dates
reformatted) and business errors reported inside responses are raised
as AFIPServiceError.
"""

__version__ = "1.0.0"
