# -*- coding: utf-8 -*-
# Copyright (c) 2024, Digital Consulting Service LLC (Mongolia)
# License: GNU General Public License v3

"""
Tests for AFIP response normalization and error classification

Pure functions, no site or network access needed.
"""

import copy
import unittest

from afip.api.transformer import (
	AFIPTransformer,
	as_list,
	check_errors,
	format_date,
	is_taxpayer_not_found,
	to_scalar,
)
from afip.exceptions import AFIPServiceError
from afip.utils.testing import make_cae_response, make_error_response, make_voucher_data


class TestNormalization(unittest.TestCase):
	"""Array/scalar normalization helpers"""

	def test_to_scalar_collapses_single_item_list(self):
		self.assertEqual(to_scalar([{"CAE": "1"}]), {"CAE": "1"})

	def test_to_scalar_takes_first_of_many(self):
		self.assertEqual(to_scalar([1, 2, 3]), 1)

	def test_to_scalar_keeps_scalars(self):
		self.assertEqual(to_scalar({"CAE": "1"}), {"CAE": "1"})
		self.assertEqual(to_scalar("A"), "A")

	def test_to_scalar_empty_list(self):
		self.assertIsNone(to_scalar([]))

	def test_as_list(self):
		self.assertEqual(as_list(None), [])
		self.assertEqual(as_list({"Id": 1}), [{"Id": 1}])
		items = [{"Id": 1}, {"Id": 2}]
		self.assertIs(as_list(items), items)


class TestFormatDate(unittest.TestCase):
	"""AFIP compact date reformatting"""

	def test_string_date(self):
		self.assertEqual(format_date("20230415"), "2023-04-15")

	def test_int_date(self):
		self.assertEqual(format_date(20230415), "2023-04-15")

	def test_end_of_year(self):
		self.assertEqual(format_date("19991231"), "1999-12-31")

	def test_none(self):
		self.assertIsNone(format_date(None))


class TestTaxpayerNotFound(unittest.TestCase):

	def test_registry_message(self):
		self.assertTrue(is_taxpayer_not_found("No existe persona con ese Id"))

	def test_other_messages(self):
		self.assertFalse(is_taxpayer_not_found("Error interno de base de datos"))
		self.assertFalse(is_taxpayer_not_found(None))


class TestCheckErrors(unittest.TestCase):
	"""Business error detection"""

	def test_no_errors(self):
		check_errors("FECompUltimoAutorizado", {"FECompUltimoAutorizadoResult": {"CbteNro": 3}})

	def test_single_error(self):
		results = {"FECompConsultarResult": {"Errors": {"Err": {"Code": 602, "Msg": "Sin Resultados"}}}}

		with self.assertRaises(AFIPServiceError) as ctx:
			check_errors("FECompConsultar", results)

		self.assertEqual(ctx.exception.code, 602)
		self.assertEqual(ctx.exception.message, "Sin Resultados")
		self.assertEqual(str(ctx.exception), "(602) Sin Resultados")

	def test_first_of_many_errors(self):
		results = make_error_response("FEParamGetTiposCbte", (600, "No autorizado"), (601, "CUIT no coincide"))

		with self.assertRaises(AFIPServiceError) as ctx:
			check_errors("FEParamGetTiposCbte", results)

		self.assertEqual(ctx.exception.code, 600)
		self.assertEqual(ctx.exception.message, "No autorizado")

	def test_string_code_is_converted(self):
		results = make_error_response("FECompConsultar", ("602", "Sin Resultados"))

		with self.assertRaises(AFIPServiceError) as ctx:
			check_errors("FECompConsultar", results)

		self.assertEqual(ctx.exception.code, 602)

	def test_rejected_voucher_observations(self):
		results = make_cae_response(result="R", observations=[
			{"Code": 10016, "Msg": "El numero o fecha del comprobante no se corresponde con el proximo a autorizar"},
			{"Code": 10015, "Msg": "Factura B con DocTipo 99"}
		])

		with self.assertRaises(AFIPServiceError) as ctx:
			check_errors("FECAESolicitar", results)

		self.assertEqual(ctx.exception.code, 10016)
		self.assertIn("proximo a autorizar", ctx.exception.message)

	def test_rejected_voucher_observations_scalar_detail(self):
		results = make_cae_response(result="R", as_list=False, observations=[
			{"Code": 10048, "Msg": "Importe total mal calculado"}
		])

		with self.assertRaises(AFIPServiceError) as ctx:
			check_errors("FECAESolicitar", results)

		self.assertEqual(ctx.exception.code, 10048)

	def test_approved_voucher_with_observations_passes(self):
		results = make_cae_response(result="A", observations=[
			{"Code": 10217, "Msg": "Informativa"}
		])

		check_errors("FECAESolicitar", results)

	def test_rejected_voucher_without_observations_uses_errors(self):
		results = make_cae_response(result="R")
		results["FECAESolicitarResult"]["Errors"] = {"Err": [{"Code": 10000, "Msg": "Error general"}]}

		with self.assertRaises(AFIPServiceError) as ctx:
			check_errors("FECAESolicitar", results)

		self.assertEqual(ctx.exception.code, 10000)

	def test_does_not_modify_response(self):
		results = make_cae_response(result="R", observations=[{"Code": 1, "Msg": "x"}])
		snapshot = copy.deepcopy(results)

		with self.assertRaises(AFIPServiceError):
			check_errors("FECAESolicitar", results)

		self.assertEqual(results, snapshot)


class TestVoucherToApi(unittest.TestCase):
	"""FECAESolicitar request building"""

	def setUp(self):
		self.transformer = AFIPTransformer()

	def test_header(self):
		req = self.transformer.voucher_to_api(make_voucher_data(CbteDesde=5, CbteHasta=7))

		self.assertEqual(req["FeCAEReq"]["FeCabReq"], {"CantReg": 3, "PtoVta": 1, "CbteTipo": 6})

	def test_header_fields_removed_from_detail(self):
		req = self.transformer.voucher_to_api(make_voucher_data(token={"token": "t", "sign": "s"}))
		detail = req["FeCAEReq"]["FeDetReq"]["FECAEDetRequest"]

		for field in ("CantReg", "PtoVta", "CbteTipo", "token"):
			self.assertNotIn(field, detail)
		self.assertEqual(detail["CbteDesde"], 1)
		self.assertEqual(detail["ImpTotal"], 121)

	def test_plural_fields_wrapped(self):
		tributos = [
			{"Id": 99, "Desc": "Ingresos Brutos", "BaseImp": 150, "Alic": 5.2, "Importe": 7.8},
			{"Id": 2, "Desc": "Impuesto municipal", "BaseImp": 150, "Alic": 1, "Importe": 1.5}
		]
		data = make_voucher_data(
			Tributos=tributos,
			CbtesAsoc=[{"Tipo": 6, "PtoVta": 1, "Nro": 3}],
			Compradores=[{"DocTipo": 80, "DocNro": 20111111112, "Porcentaje": 100}],
			Opcionales=[{"Id": 17, "Valor": 2}]
		)

		detail = self.transformer.voucher_to_api(data)["FeCAEReq"]["FeDetReq"]["FECAEDetRequest"]

		self.assertEqual(detail["Tributos"], {"Tributo": tributos})
		self.assertEqual(detail["Iva"], {"AlicIva": [{"Id": 5, "BaseImp": 100, "Importe": 21}]})
		self.assertEqual(detail["CbtesAsoc"], {"CbteAsoc": [{"Tipo": 6, "PtoVta": 1, "Nro": 3}]})
		self.assertEqual(detail["Compradores"], {"Comprador": [{"DocTipo": 80, "DocNro": 20111111112, "Porcentaje": 100}]})
		self.assertEqual(detail["Opcionales"], {"Opcional": [{"Id": 17, "Valor": 2}]})

	def test_absent_plural_fields_not_added(self):
		data = make_voucher_data()
		del data["Iva"]

		detail = self.transformer.voucher_to_api(data)["FeCAEReq"]["FeDetReq"]["FECAEDetRequest"]

		for field in ("Iva", "Tributos", "CbtesAsoc", "Compradores", "Opcionales"):
			self.assertNotIn(field, detail)

	def test_input_not_modified(self):
		data = make_voucher_data(Tributos=[{"Id": 99, "Importe": 1}])
		snapshot = copy.deepcopy(data)

		self.transformer.voucher_to_api(data)

		self.assertEqual(data, snapshot)

	def test_api_to_cae(self):
		result = make_cae_response()["FECAESolicitarResult"]

		self.assertEqual(self.transformer.api_to_cae(result), {
			"CAE": "73151234567890",
			"CAEFchVto": "2023-04-25"
		})

	def test_api_to_cae_same_for_list_and_scalar(self):
		as_list_result = make_cae_response(as_list=True)["FECAESolicitarResult"]
		as_scalar_result = make_cae_response(as_list=False)["FECAESolicitarResult"]

		self.assertEqual(
			self.transformer.api_to_cae(as_list_result),
			self.transformer.api_to_cae(as_scalar_result)
		)

	def test_normalize_cae_response(self):
		result = make_cae_response(as_list=True)["FECAESolicitarResult"]

		self.transformer.normalize_cae_response(result)

		self.assertIsInstance(result["FeDetResp"]["FECAEDetResponse"], dict)
		self.assertEqual(result["FeDetResp"]["FECAEDetResponse"]["CAE"], "73151234567890")
