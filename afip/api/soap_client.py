# -*- coding: utf-8 -*-
# Copyright (c) 2024, Digital Consulting Service LLC (Mongolia)
# License: GNU General Public License v3
# pyright: reportMissingImports=false, reportAttributeAccessIssue=false, reportArgumentType=false

"""
AFIP API - SOAP Client Module

Handles all SOAP communication with AFIP web services on top of zeep's
async client (httpx transport).

Responses are returned as plain dicts/lists with AFIP's field names kept
as-is. Repeated elements come back as lists even when the service sent a
single item; callers normalize that themselves.
"""

import asyncio
import time
from contextlib import contextmanager

import frappe
import httpx
from zeep import AsyncClient, Settings
from zeep.exceptions import Error as ZeepError
from zeep.exceptions import Fault, TransportError
from zeep.helpers import serialize_object
from zeep.proxy import AsyncServiceProxy
from zeep.transports import AsyncTransport

from afip.exceptions import AFIPConfigError, AFIPSoapFault, AFIPTransportError
from afip.logger import log_debug, redact


class AFIPSoapClient:
	"""
	SOAP transport for one AFIP service.

	Key features:
	- WSDL and endpoint picked from the configured environment
	- WSDL loaded lazily, off the event loop
	- zeep/httpx errors translated to AFIP exceptions
	- Debug mode request logging (credentials redacted)

	Options:
		WSDL / URL: Production WSDL and endpoint
		WSDL_TEST / URL_TEST: Testing (homologation) WSDL and endpoint
		BINDING: Qualified binding name to bind the endpoint to
	"""

	DEFAULT_TIMEOUT = 30

	def __init__(self, options, settings=None):
		"""
		Initialize SOAP client.

		Args:
			options: Service options (WSDL, URL, WSDL_TEST, URL_TEST, BINDING)
			settings: AFIP Settings doc or None
		"""
		self.options = options
		self.settings = settings or self._get_settings()
		self._client = None
		self._service = None

	def _get_settings(self):
		"""Get AFIP Settings singleton"""
		return frappe.get_single("AFIP Settings")

	@property
	def production(self):
		"""Whether requests go to the production environment"""
		return bool(self.settings) and self.settings.environment == "Production"

	@property
	def wsdl(self):
		"""Get WSDL location for the current environment"""
		return self.options["WSDL"] if self.production else self.options["WSDL_TEST"]

	@property
	def url(self):
		"""Get service endpoint for the current environment"""
		return self.options["URL"] if self.production else self.options["URL_TEST"]

	@property
	def timeout(self):
		"""Get request timeout"""
		if self.settings:
			return self.settings.timeout or self.DEFAULT_TIMEOUT
		return self.DEFAULT_TIMEOUT

	@property
	def debug_mode(self):
		"""Check if debug mode is enabled"""
		return bool(self.settings and self.settings.debug_mode)

	@contextmanager
	def _translate_errors(self):
		"""Map zeep/httpx failures to AFIP exceptions"""
		try:
			yield
		except Fault as e:
			raise AFIPSoapFault(e.message, code=e.code) from e
		except TransportError as e:
			raise AFIPTransportError(f"HTTP {e.status_code}: {e.message}", status_code=e.status_code) from e
		except httpx.TimeoutException as e:
			raise AFIPTransportError(f"Request timeout after {self.timeout}s", status_code=408) from e
		except httpx.HTTPError as e:
			raise AFIPTransportError(f"Connection error: {e!s}", status_code=503) from e
		except ZeepError as e:
			raise AFIPTransportError(f"Invalid SOAP response: {e!s}") from e

	def _build_client(self):
		"""Load the WSDL and bind the environment endpoint (blocking)"""
		transport = AsyncTransport(timeout=self.timeout, operation_timeout=self.timeout)
		client = AsyncClient(self.wsdl, transport=transport, settings=Settings(strict=False))

		bindings = client.wsdl.bindings
		name = self.options.get("BINDING") or next(iter(bindings))
		if name not in bindings:
			transport.wsdl_client.close()
			raise AFIPConfigError(
				f"Binding {name} not found in {self.wsdl}. Available: {', '.join(bindings)}"
			)

		# AsyncClient.create_service() returns the sync ServiceProxy
		return client, AsyncServiceProxy(client, bindings[name], address=self.url)

	async def _get_service(self):
		"""Get bound service proxy, loading the WSDL on first use"""
		if self._service is None:
			with self._translate_errors():
				self._client, self._service = await asyncio.to_thread(self._build_client)
		return self._service

	def _result_key(self, operation):
		"""
		Name of the response element zeep strips when it is the only child.

		zeep returns the content of a single-child response wrapper directly;
		the name is read back from the binding so the caller still sees e.g.
		FEDummyResult or personaReturn.
		"""
		body = self._service._binding.get(operation).output.body
		if body is None:
			return None

		children = body.type.elements
		if len(children) == 1 and not body.type.attributes:
			return children[0][0]
		return None

	def _log_request(self, operation, params, duration):
		"""Log request details in debug mode"""
		if not self.debug_mode:
			return

		log_debug(f"AFIP SOAP Request: {operation}", {
			"url": self.url,
			"params": redact(params),
			"duration": duration
		})

	async def execute(self, operation, params=None):
		"""
		Execute a SOAP operation.

		Args:
			operation: Operation name as declared in the WSDL
			params: Parameter tree (dicts/lists keyed by AFIP field names)

		Returns:
			dict: Response tree keyed by the response element name

		Raises:
			AFIPSoapFault: On SOAP fault
			AFIPTransportError: On network/protocol failure
		"""
		params = params or {}
		service = await self._get_service()

		start_time = time.monotonic()
		try:
			with self._translate_errors():
				result = await getattr(service, operation)(**params)
		finally:
			self._log_request(operation, params, round(time.monotonic() - start_time, 2))

		result = serialize_object(result, dict)

		key = self._result_key(operation)
		if key is not None:
			return {key: result}
		return result

	async def close(self):
		"""Release HTTP connections"""
		if self._client is not None:
			self._client.transport.wsdl_client.close()
			await self._client.transport.aclose()
			self._client = None
			self._service = None
