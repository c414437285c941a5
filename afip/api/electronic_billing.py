# -*- coding: utf-8 -*-
# Copyright (c) 2024, Digital Consulting Service LLC (Mongolia)
# License: GNU General Public License v3
# pyright: reportMissingImports=false, reportAttributeAccessIssue=false

"""
AFIP Electronic Billing Client (wsfe v1)

Voucher Management:
1. FECompUltimoAutorizado - Last authorized voucher number
2. FECAESolicitar - Create voucher(s) and get CAE
3. FECompConsultar - Voucher details

CAEA Management:
4. FECAEASolicitar - Request a CAEA for a fortnight
5. FECAEAConsultar - Query a CAEA

Reference Data:
6. FEParamGetPtosVenta - Sales points
7. FEParamGetTiposCbte - Voucher types
8. FEParamGetTiposConcepto - Concept types
9. FEParamGetTiposDoc - Document types
10. FEParamGetTiposIva - VAT aliquots
11. FEParamGetTiposMonedas - Currencies
12. FEParamGetTiposOpcional - Optional data types
13. FEParamGetTiposTributos - Tax types

Server Status:
14. FEDummy - Application, database and auth server status

Manual: http://www.afip.gob.ar/fe/documentos/manual_desarrollador_COMPG_v2_10.pdf
"""

from afip.api.base import AFIPWebService
from afip.api.transformer import (
	VOUCHER_NOT_FOUND,
	AFIPTransformer,
	as_list,
	check_errors,
)
from afip.exceptions import AFIPServiceError
from afip.logger import log_info


class ElectronicBillingClient(AFIPWebService):
	"""
	AFIP Electronic Billing (wsfe) client.

	Usage:
		client = ElectronicBillingClient()

		# Next voucher number
		last = await client.get_last_voucher(1, 6)

		# Create voucher
		result = await client.create_voucher(data)
		# {"CAE": "73123456789012", "CAEFchVto": "2023-04-25"}

	Every method accepts an optional pre-fetched credential
	({"token": ..., "sign": ...}) to reuse one access ticket across calls.
	"""

	SERVICE = "wsfe"

	OPTIONS = {
		"WSDL": "https://servicios1.afip.gov.ar/wsfev1/service.asmx?WSDL",
		"URL": "https://servicios1.afip.gov.ar/wsfev1/service.asmx",
		"WSDL_TEST": "https://wswhomo.afip.gov.ar/wsfev1/service.asmx?WSDL",
		"URL_TEST": "https://wswhomo.afip.gov.ar/wsfev1/service.asmx",
		"BINDING": "{http://ar.gov.afip.dif.FEV1/}ServiceSoap12"
	}

	# Operation that needs no Auth block
	DUMMY_OPERATION = "FEDummy"

	# Reference data: method -> (operation, ResultGet field)
	REFERENCE_DATA = {
		"sales_points": ("FEParamGetPtosVenta", "PtoVenta"),
		"voucher_types": ("FEParamGetTiposCbte", "CbteTipo"),
		"concept_types": ("FEParamGetTiposConcepto", "ConceptoTipo"),
		"document_types": ("FEParamGetTiposDoc", "DocTipo"),
		"aliquot_types": ("FEParamGetTiposIva", "IvaTipo"),
		"currencies_types": ("FEParamGetTiposMonedas", "Moneda"),
		"options_types": ("FEParamGetTiposOpcional", "OpcionalTipo"),
		"tax_types": ("FEParamGetTiposTributos", "TributoTipo"),
	}

	def __init__(self, settings=None, soap=None, auth=None):
		super().__init__(settings, soap, auth)
		self.transformer = AFIPTransformer()

	# =========================================================================
	# Vouchers
	# =========================================================================

	async def get_last_voucher(self, sales_point, voucher_type, credential=None):
		"""
		Get number of the last voucher created for a sales point and type.

		Args:
			sales_point: Sales point (PtoVta)
			voucher_type: Voucher type (CbteTipo)
			credential: Pre-fetched access ticket

		Returns:
			int: Last voucher number (0 if none was issued yet)
		"""
		req = {
			"PtoVta": sales_point,
			"CbteTipo": voucher_type
		}

		result = await self.execute_request("FECompUltimoAutorizado", req, credential)
		return int(result["CbteNro"])

	async def create_voucher(self, data, return_response=False, credential=None):
		"""
		Create voucher(s) and get the CAE assigned to them.

		Args:
			data: Voucher fields as named by AFIP (PtoVta, CbteTipo,
				CbteDesde, CbteHasta, Concepto, DocTipo, DocNro, ImpTotal, ...).
				List fields are passed plain and wrapped here:
					Iva: [{"Id": 5, "BaseImp": 100, "Importe": 21}]
					Tributos, CbtesAsoc, Compradores, Opcionales: same idea
				The dict is not modified.
			return_response: Return the complete FECAESolicitarResult
			credential: Pre-fetched access ticket. Takes precedence over a
				"token" entry in data, which is never sent to AFIP.

		Returns:
			dict: {"CAE": ..., "CAEFchVto": "yyyy-mm-dd"}, or the complete
				response if return_response is set

		Raises:
			AFIPServiceError: If AFIP rejects the voucher
		"""
		credential = credential or data.get("token")

		req = self.transformer.voucher_to_api(data)
		result = await self.execute_request("FECAESolicitar", req, credential)
		result = self.transformer.normalize_cae_response(result)

		if return_response:
			return result

		return self.transformer.api_to_cae(result)

	async def create_next_voucher(self, data, credential=None):
		"""
		Create the next voucher of a sales point and type.

		Combines get_last_voucher and create_voucher. The two calls are
		not atomic: concurrent callers on the same PtoVta/CbteTipo can
		compute the same number and AFIP rejects the later one. Serialize
		calls per (PtoVta, CbteTipo) when that can happen.

		Args:
			data: Same as create_voucher, without CbteDesde/CbteHasta
			credential: Pre-fetched access ticket, used for both calls

		Returns:
			dict: {"CAE": ..., "CAEFchVto": ..., "voucherNumber": ...}
		"""
		credential = credential or data.get("token")

		last_voucher = await self.get_last_voucher(data["PtoVta"], data["CbteTipo"], credential)
		voucher_number = last_voucher + 1

		voucher = dict(data, CbteDesde=voucher_number, CbteHasta=voucher_number)

		res = await self.create_voucher(voucher, credential=credential)
		res["voucherNumber"] = voucher_number

		log_info(f"Voucher created: {data['PtoVta']}-{data['CbteTipo']}-{voucher_number}", {
			"CAE": res.get("CAE")
		})

		return res

	async def get_voucher_info(self, number, sales_point, voucher_type, credential=None):
		"""
		Get complete information of a voucher.

		Args:
			number: Voucher number (CbteNro)
			sales_point: Sales point (PtoVta)
			voucher_type: Voucher type (CbteTipo)
			credential: Pre-fetched access ticket

		Returns:
			dict|None: Voucher details, None if it does not exist
		"""
		req = {
			"FeCompConsReq": {
				"CbteNro": number,
				"PtoVta": sales_point,
				"CbteTipo": voucher_type
			}
		}

		try:
			result = await self.execute_request("FECompConsultar", req, credential)
		except AFIPServiceError as e:
			if e.code == VOUCHER_NOT_FOUND:
				return None
			raise

		return result.get("ResultGet")

	# =========================================================================
	# CAEA
	# =========================================================================

	async def create_caea(self, period, fortnight, credential=None):
		"""
		Request a CAEA.

		Args:
			period: Period as yyyymm (e.g. 202304)
			fortnight: Monthly fortnight (1 or 2)
			credential: Pre-fetched access ticket

		Returns:
			dict: CAEA details (ResultGet)
		"""
		req = self._caea_request(period, fortnight)
		return (await self.execute_request("FECAEASolicitar", req, credential)).get("ResultGet")

	async def get_caea(self, period, fortnight, credential=None):
		"""
		Get information of a CAEA.

		Args:
			period: Period as yyyymm (e.g. 202304)
			fortnight: Monthly fortnight (1 or 2)
			credential: Pre-fetched access ticket

		Returns:
			dict: CAEA details (ResultGet)
		"""
		req = self._caea_request(period, fortnight)
		return (await self.execute_request("FECAEAConsultar", req, credential)).get("ResultGet")

	def _caea_request(self, period, fortnight):
		if fortnight not in (1, 2):
			raise ValueError(f"fortnight must be 1 or 2, got {fortnight!r}")
		return {
			"Periodo": period,
			"Orden": fortnight
		}

	# =========================================================================
	# Reference data
	# =========================================================================

	async def _get_reference_data(self, name, credential=None):
		operation, field = self.REFERENCE_DATA[name]
		result = await self.execute_request(operation, None, credential)
		return as_list((result.get("ResultGet") or {}).get(field))

	async def get_sales_points(self, credential=None):
		"""Get sales points enabled for electronic billing"""
		return await self._get_reference_data("sales_points", credential)

	async def get_voucher_types(self, credential=None):
		"""Get available voucher types"""
		return await self._get_reference_data("voucher_types", credential)

	async def get_concept_types(self, credential=None):
		"""Get available voucher concepts"""
		return await self._get_reference_data("concept_types", credential)

	async def get_document_types(self, credential=None):
		"""Get available document types"""
		return await self._get_reference_data("document_types", credential)

	async def get_aliquot_types(self, credential=None):
		"""Get available VAT aliquots"""
		return await self._get_reference_data("aliquot_types", credential)

	async def get_currencies_types(self, credential=None):
		"""Get available currencies"""
		return await self._get_reference_data("currencies_types", credential)

	async def get_options_types(self, credential=None):
		"""Get available optional data types"""
		return await self._get_reference_data("options_types", credential)

	async def get_tax_types(self, credential=None):
		"""Get available tax types"""
		return await self._get_reference_data("tax_types", credential)

	async def get_server_status(self, credential=None):
		"""
		Get server status.

		Returns:
			dict: {"AppServer": ..., "DbServer": ..., "AuthServer": ...}
		"""
		return await self.execute_request(self.DUMMY_OPERATION, None, credential)

	# =========================================================================
	# Request plumbing
	# =========================================================================

	async def get_initial_request(self, operation, credential=None):
		"""
		Make the Auth block most operations need.

		Returns:
			dict: {"Auth": {"Token", "Sign", "Cuit"}}, empty for FEDummy
		"""
		if operation == self.DUMMY_OPERATION:
			return {}

		credential = await self.get_credential(credential)

		return {
			"Auth": {
				"Token": credential.token,
				"Sign": credential.sign,
				"Cuit": self.cuit
			}
		}

	async def execute_request(self, operation, params=None, credential=None):
		"""
		Send request to AFIP servers.

		Args:
			operation: SOAP operation to execute
			params: Parameters to send (not modified)
			credential: Pre-fetched access ticket

		Returns:
			dict: <operation>Result

		Raises:
			AFIPServiceError: If AFIP reports an error in the response
		"""
		params = dict(params or {})
		params.update(await self.get_initial_request(operation, credential))

		results = await super().execute_request(operation, params)
		return results[f"{operation}Result"]

	def check_response(self, operation, results):
		check_errors(operation, results)


def get_electronic_billing():
	"""Get Electronic Billing client instance"""
	return ElectronicBillingClient()
