# -*- coding: utf-8 -*-
# Copyright (c) 2024, Digital Consulting Service LLC (Mongolia)
# License: GNU General Public License v3
# pyright: reportMissingImports=false, reportAttributeAccessIssue=false

"""
AFIP API - Authentication Module

Resolves the token/sign pair (access ticket) each AFIP service call needs.

Tickets are issued by AFIP's WSAA ticket service. This app does not talk to
WSAA itself: another app (or site code) registers a ticket provider through
the ``afip_ticket_provider`` hook:

	# hooks.py of the providing app
	afip_ticket_provider = "my_app.wsaa.get_ticket"

	def get_ticket(service, settings):
		return {"token": "...", "sign": "..."}

The provider may be a plain function or a coroutine function.
"""

import inspect
from dataclasses import dataclass

import frappe

from afip.exceptions import AFIPAuthError


@dataclass(frozen=True)
class Credential:
	"""Delegated token/sign pair for one AFIP service"""

	token: str
	sign: str
	service: str | None = None

	@classmethod
	def from_value(cls, value, service=None):
		"""
		Build a Credential from what callers usually have at hand.

		Args:
			value: Credential, {"token": ..., "sign": ...} mapping or (token, sign) pair
			service: Service name the ticket was issued for

		Returns:
			Credential

		Raises:
			AFIPAuthError: If token or sign is missing
		"""
		if isinstance(value, cls):
			return value

		if isinstance(value, dict):
			token, sign = value.get("token"), value.get("sign")
		elif isinstance(value, (tuple, list)) and len(value) == 2:
			token, sign = value
		else:
			token = getattr(value, "token", None)
			sign = getattr(value, "sign", None)

		if not token or not sign:
			raise AFIPAuthError(f"Incomplete access ticket for {service or 'AFIP service'}: token and sign are required")

		return cls(token=token, sign=sign, service=service)


class AFIPAuth:
	"""
	Access ticket delegate for AFIP services.

	Usage:
		auth = AFIPAuth(settings)
		credential = await auth.get_credential("wsfe")
	"""

	HOOK_NAME = "afip_ticket_provider"

	def __init__(self, settings=None, ticket_provider=None):
		"""
		Initialize auth delegate.

		Args:
			settings: AFIP Settings doc or None to fetch automatically
			ticket_provider: Callable(service, settings) overriding the hook
		"""
		self.settings = settings or self._get_settings()
		self._ticket_provider = ticket_provider

	def _get_settings(self):
		"""Get AFIP Settings singleton"""
		return frappe.get_single("AFIP Settings")

	def _get_ticket_provider(self):
		"""Resolve the ticket provider, last registered hook wins"""
		if self._ticket_provider:
			return self._ticket_provider

		providers = frappe.get_hooks(self.HOOK_NAME)
		if not providers:
			raise AFIPAuthError(
				"No AFIP ticket provider configured. Register one with the "
				f"'{self.HOOK_NAME}' hook."
			)

		return frappe.get_attr(providers[-1])

	async def get_credential(self, service):
		"""
		Get token and sign for a service.

		Args:
			service: AFIP service name (e.g. "wsfe", "ws_sr_padron_a4")

		Returns:
			Credential

		Raises:
			AFIPAuthError: If no provider exists or the ticket is incomplete
		"""
		provider = self._get_ticket_provider()

		ticket = provider(service, self.settings)
		if inspect.isawaitable(ticket):
			ticket = await ticket

		if ticket is None:
			raise AFIPAuthError(f"No access ticket available for {service}")

		return Credential.from_value(ticket, service=service)


def get_auth():
	"""Get AFIP Auth instance"""
	return AFIPAuth()
