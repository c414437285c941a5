# -*- coding: utf-8 -*-
# Copyright (c) 2024, Digital Consulting Service LLC (Mongolia)
# License: GNU General Public License v3
# pyright: reportMissingImports=false

"""
AFIP API - Data Transformer Module

Shapes requests for and normalizes responses from AFIP web services:

- Voucher data -> FECAESolicitar request (singular/plural wrappers)
- Array/scalar normalization of repeated response elements
- AFIP compact dates (yyyymmdd) -> ISO dates
- Detection of business errors embedded in successful responses
"""

import re

from afip.exceptions import AFIPServiceError


# Voucher result code for an approved voucher
APPROVED = "A"

# FECompConsultar error code for "voucher does not exist"
VOUCHER_NOT_FOUND = 602

# Text AFIP's taxpayer registry puts in its fault message when the
# identifier is unknown ("No existe persona con ese Id"). Depends on the
# vendor's wording: if AFIP rephrases it, lookups start raising instead.
TAXPAYER_NOT_FOUND_TEXT = "No existe"

_COMPACT_DATE = re.compile(r"(\d{4})(\d{2})(\d{2})")


def to_scalar(value):
	"""
	Collapse a repeated element to its first item.

	AFIP (and zeep) return repeated elements as lists even when a single
	item was requested; a non-list value is returned unchanged.
	"""
	if isinstance(value, list):
		return value[0] if value else None
	return value


def as_list(value):
	"""Normalize a repeated element to a list (None -> [])"""
	if value is None:
		return []
	if isinstance(value, list):
		return value
	return [value]


def format_date(value):
	"""
	Change date from AFIP format (yyyymmdd) to yyyy-mm-dd.

	Accepts str or int; None is returned unchanged.
	"""
	if value is None:
		return None
	return _COMPACT_DATE.sub(r"\1-\2-\3", str(value), count=1)


def is_taxpayer_not_found(message):
	"""Whether a registry error message means the taxpayer does not exist"""
	return TAXPAYER_NOT_FOUND_TEXT in (message or "")


def check_errors(operation, results):
	"""
	Raise the business error embedded in an AFIP response, if any.

	For FECAESolicitar a voucher that was not approved and carries
	observations is reported through those observations. Otherwise the
	first entry of Errors.Err is used.

	Args:
		operation: SOAP operation name
		results: Response tree holding <operation>Result

	Raises:
		AFIPServiceError: With AFIP's numeric code and message
	"""
	res = results.get(f"{operation}Result") or {}
	errors = res.get("Errors")

	if operation == "FECAESolicitar" and res.get("FeDetResp"):
		detail = to_scalar(res["FeDetResp"].get("FECAEDetResponse")) or {}
		observations = detail.get("Observaciones")
		if observations and detail.get("Resultado") != APPROVED:
			errors = {"Err": observations.get("Obs")}

	if not errors:
		return

	err = to_scalar(errors.get("Err"))
	if not err:
		return

	raise AFIPServiceError(err.get("Msg"), code=_error_code(err.get("Code")), response_data=res)


def _error_code(code):
	try:
		return int(code)
	except (TypeError, ValueError):
		return code


class AFIPTransformer:
	"""
	Transform voucher data to/from the wsfe FECAESolicitar format.

	API -> caller: api_to_*
	caller -> API: *_to_api
	"""

	# Caller field -> element wsfe expects inside it
	PLURAL_FIELDS = {
		"Tributos": "Tributo",
		"Iva": "AlicIva",
		"CbtesAsoc": "CbteAsoc",
		"Compradores": "Comprador",
		"Opcionales": "Opcional",
	}

	# Fields moved to the request header or not sent at all
	HEADER_FIELDS = ("CantReg", "PtoVta", "CbteTipo")
	PRIVATE_FIELDS = ("token",)

	def voucher_to_api(self, data):
		"""
		Build the FECAESolicitar request for a voucher range.

		Args:
			data: Voucher fields (PtoVta, CbteTipo, CbteDesde, CbteHasta, ...);
				not modified

		Returns:
			dict: {"FeCAEReq": {"FeCabReq": ..., "FeDetReq": ...}}
		"""
		detail = dict(data)

		header = {
			"CantReg": data["CbteHasta"] - data["CbteDesde"] + 1,
			"PtoVta": data["PtoVta"],
			"CbteTipo": data["CbteTipo"]
		}

		for field in self.HEADER_FIELDS + self.PRIVATE_FIELDS:
			detail.pop(field, None)

		for field, element in self.PLURAL_FIELDS.items():
			if field in detail:
				detail[field] = {element: detail[field]}

		return {
			"FeCAEReq": {
				"FeCabReq": header,
				"FeDetReq": {
					"FECAEDetRequest": detail
				}
			}
		}

	def normalize_cae_response(self, result):
		"""Collapse FeDetResp.FECAEDetResponse to a single voucher, in place"""
		det_resp = result.get("FeDetResp")
		if det_resp and isinstance(det_resp.get("FECAEDetResponse"), list):
			det_resp["FECAEDetResponse"] = to_scalar(det_resp["FECAEDetResponse"])
		return result

	def api_to_cae(self, result):
		"""
		Extract the authorization code of a created voucher.

		Returns:
			dict: {"CAE": ..., "CAEFchVto": "yyyy-mm-dd"}
		"""
		detail = to_scalar(result["FeDetResp"]["FECAEDetResponse"])
		return {
			"CAE": detail["CAE"],
			"CAEFchVto": format_date(detail["CAEFchVto"])
		}


def get_transformer():
	"""Get AFIP Transformer instance"""
	return AFIPTransformer()
