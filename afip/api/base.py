# -*- coding: utf-8 -*-
# Copyright (c) 2024, Digital Consulting Service LLC (Mongolia)
# License: GNU General Public License v3
# pyright: reportMissingImports=false, reportAttributeAccessIssue=false

"""
AFIP API - Web Service Base

Shared plumbing for the AFIP service clients: settings, SOAP transport,
access ticket resolution and call logging.
"""

import time

import frappe

from afip.api.auth import AFIPAuth, Credential
from afip.api.soap_client import AFIPSoapClient
from afip.exceptions import AFIPConfigError, AFIPServiceError, AFIPTransportError
from afip.logger import log_api_call


class AFIPWebService:
	"""
	Base class for AFIP web service clients.

	Subclasses declare SERVICE (the name access tickets are issued for)
	and OPTIONS (WSDL/endpoint per environment, see AFIPSoapClient).
	"""

	SERVICE = None
	OPTIONS = {}

	def __init__(self, settings=None, soap=None, auth=None):
		"""
		Initialize client.

		Args:
			settings: AFIP Settings doc or None
			soap: Transport with an async execute(operation, params)
			auth: Delegate with an async get_credential(service)
		"""
		self.settings = settings or self._get_settings()
		self.soap = soap or AFIPSoapClient(self.OPTIONS, self.settings)
		self.auth = auth or AFIPAuth(self.settings)

	def _get_settings(self):
		"""Get AFIP Settings singleton"""
		return frappe.get_single("AFIP Settings")

	@property
	def cuit(self):
		"""CUIT the requests are made on behalf of"""
		cuit = getattr(self.settings, "cuit", None)
		if not cuit:
			raise AFIPConfigError("CUIT is not configured in AFIP Settings")
		return int(cuit)

	async def get_credential(self, credential=None):
		"""
		Get token and sign for this service.

		Args:
			credential: Pre-fetched ticket; skips the auth delegate

		Returns:
			Credential
		"""
		if credential:
			return Credential.from_value(credential, service=self.SERVICE)
		return await self.auth.get_credential(self.SERVICE)

	async def execute_request(self, operation, params=None):
		"""
		Send request to AFIP servers.

		Args:
			operation: SOAP operation to execute
			params: Parameters to send

		Returns:
			dict: Response tree
		"""
		start_time = time.monotonic()
		try:
			results = await self.soap.execute(operation, params or {})
			self.check_response(operation, results)
		except AFIPServiceError as e:
			log_api_call(self.SERVICE, operation, params, status="Rejected",
				error_message=str(e), execution_time=round(time.monotonic() - start_time, 2))
			raise
		except AFIPTransportError as e:
			log_api_call(self.SERVICE, operation, params, status="Failed",
				error_message=str(e), execution_time=round(time.monotonic() - start_time, 2))
			raise

		log_api_call(self.SERVICE, operation, execution_time=round(time.monotonic() - start_time, 2))
		return results

	def check_response(self, operation, results):
		"""Raise AFIPServiceError for a business error carried in a response"""
		pass

	async def close(self):
		"""Release transport connections"""
		close = getattr(self.soap, "close", None)
		if close is not None:
			await close()
