# -*- coding: utf-8 -*-
# Copyright (c) 2024, Digital Consulting Service LLC (Mongolia)
# License: GNU General Public License v3

"""
Tests for AFIP access ticket resolution
"""

import unittest
from types import SimpleNamespace
from unittest.mock import patch

from afip.api.auth import AFIPAuth, Credential
from afip.exceptions import AFIPAuthError
from afip.utils.testing import make_settings


class TestCredential(unittest.TestCase):

	def test_from_dict(self):
		credential = Credential.from_value({"token": "t", "sign": "s"}, service="wsfe")

		self.assertEqual(credential, Credential(token="t", sign="s", service="wsfe"))

	def test_from_pair(self):
		self.assertEqual(Credential.from_value(("t", "s")).token, "t")

	def test_from_object(self):
		ticket = SimpleNamespace(token="t", sign="s")

		self.assertEqual(Credential.from_value(ticket).sign, "s")

	def test_credential_passes_through(self):
		credential = Credential(token="t", sign="s")

		self.assertIs(Credential.from_value(credential), credential)

	def test_incomplete(self):
		for value in ({"token": "t"}, {"sign": "s"}, ("t", ""), SimpleNamespace(token="t"), None):
			with self.subTest(value=value):
				with self.assertRaises(AFIPAuthError):
					Credential.from_value(value)


class TestAFIPAuth(unittest.IsolatedAsyncioTestCase):

	def setUp(self):
		self.settings = make_settings()

	async def test_injected_provider(self):
		calls = []

		def provider(service, settings):
			calls.append((service, settings))
			return {"token": "t", "sign": "s"}

		auth = AFIPAuth(self.settings, ticket_provider=provider)
		credential = await auth.get_credential("wsfe")

		self.assertEqual(credential, Credential(token="t", sign="s", service="wsfe"))
		self.assertEqual(calls, [("wsfe", self.settings)])

	async def test_async_provider(self):
		async def provider(service, settings):
			return ("async-token", "async-sign")

		auth = AFIPAuth(self.settings, ticket_provider=provider)
		credential = await auth.get_credential("ws_sr_padron_a4")

		self.assertEqual(credential.token, "async-token")
		self.assertEqual(credential.service, "ws_sr_padron_a4")

	async def test_provider_returns_nothing(self):
		auth = AFIPAuth(self.settings, ticket_provider=lambda service, settings: None)

		with self.assertRaises(AFIPAuthError):
			await auth.get_credential("wsfe")

	async def test_hook_provider_last_wins(self):
		def first(service, settings):
			return {"token": "first", "sign": "s"}

		def second(service, settings):
			return {"token": "second", "sign": "s"}

		providers = {"app_one.wsaa.get_ticket": first, "app_two.wsaa.get_ticket": second}

		with patch("frappe.get_hooks", return_value=list(providers)) as get_hooks, \
			patch("frappe.get_attr", side_effect=providers.get):
			credential = await AFIPAuth(self.settings).get_credential("wsfe")

		get_hooks.assert_called_once_with("afip_ticket_provider")
		self.assertEqual(credential.token, "second")

	async def test_no_provider(self):
		with patch("frappe.get_hooks", return_value=[]):
			with self.assertRaises(AFIPAuthError) as ctx:
				await AFIPAuth(self.settings).get_credential("wsfe")

		self.assertIn("afip_ticket_provider", str(ctx.exception))
