# -*- coding: utf-8 -*-
# Copyright (c) 2024, Digital Consulting Service LLC (Mongolia)
# License: GNU General Public License v3
# pyright: reportMissingImports=false, reportAttributeAccessIssue=false

"""
AFIP Taxpayer Registry Client (ws_sr_padron_a4)

1. dummy - Application, database and auth server status
2. getPersona - Taxpayer details by CUIT/CUIL

Manual: http://www.afip.gob.ar/ws/ws_sr_padron_a4/manual_ws_sr_padron_a4_v1.1.pdf
"""

from afip.api.base import AFIPWebService
from afip.api.transformer import is_taxpayer_not_found
from afip.exceptions import AFIPServiceError
from afip.logger import log_debug


class RegisterScopeFourClient(AFIPWebService):
	"""
	AFIP Register Scope Four (padron A4) client.

	Usage:
		client = RegisterScopeFourClient()

		persona = await client.get_taxpayer_details(20111111112)
		if persona is None:
			...  # no such taxpayer
	"""

	SERVICE = "ws_sr_padron_a4"

	OPTIONS = {
		"WSDL": "https://aws.afip.gov.ar/sr-padron/webservices/personaServiceA4?WSDL",
		"URL": "https://aws.afip.gov.ar/sr-padron/webservices/personaServiceA4",
		"WSDL_TEST": "https://awshomo.afip.gov.ar/sr-padron/webservices/personaServiceA4?WSDL",
		"URL_TEST": "https://awshomo.afip.gov.ar/sr-padron/webservices/personaServiceA4",
		"BINDING": "{http://a4.soap.ws.server.puc.sr/}PersonaServiceA4SoapBinding"
	}

	LOOKUP_OPERATION = "getPersona"

	async def get_server_status(self):
		"""
		Get server status.

		Returns:
			dict: {"appserver": ..., "dbserver": ..., "authserver": ...}
		"""
		return await self.execute_request("dummy")

	async def get_taxpayer_details(self, identifier, credential=None):
		"""
		Get taxpayer details.

		Args:
			identifier: CUIT/CUIL of the taxpayer to look up
			credential: Pre-fetched access ticket

		Returns:
			dict|None: persona data, None if the taxpayer does not exist

		Raises:
			AFIPServiceError: For any other error reported by AFIP
		"""
		credential = await self.get_credential(credential)

		params = {
			"token": credential.token,
			"sign": credential.sign,
			"cuitRepresentada": self.cuit,
			"idPersona": identifier
		}

		try:
			result = await self.execute_request(self.LOOKUP_OPERATION, params)
		except AFIPServiceError as e:
			if is_taxpayer_not_found(e.message):
				log_debug(f"Taxpayer not found: {identifier}")
				return None
			raise

		return result.get("persona")

	async def execute_request(self, operation, params=None):
		"""
		Send request to AFIP servers.

		Returns:
			dict: personaReturn for getPersona, return for other operations
		"""
		results = await super().execute_request(operation, params)
		return results["personaReturn" if operation == self.LOOKUP_OPERATION else "return"]


def get_register_scope_four():
	"""Get Register Scope Four client instance"""
	return RegisterScopeFourClient()
