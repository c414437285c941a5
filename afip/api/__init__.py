# -*- coding: utf-8 -*-
# Copyright (c) 2024, Digital Consulting Service LLC (Mongolia)
# License: GNU General Public License v3

"""
AFIP API Module

Provides clients for AFIP web services (electronic billing and taxpayer registry).
"""

from afip.api.auth import AFIPAuth, Credential, get_auth
from afip.api.electronic_billing import ElectronicBillingClient, get_electronic_billing
from afip.api.register_scope_four import RegisterScopeFourClient, get_register_scope_four
from afip.api.soap_client import AFIPSoapClient
from afip.api.transformer import AFIPTransformer, get_transformer

__all__ = [
	"AFIPAuth",
	"AFIPSoapClient",
	"AFIPTransformer",
	"Credential",
	"ElectronicBillingClient",
	"RegisterScopeFourClient",
	"get_auth",
	"get_electronic_billing",
	"get_register_scope_four",
	"get_transformer"
]
