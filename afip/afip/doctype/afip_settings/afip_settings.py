# -*- coding: utf-8 -*-
# Copyright (c) 2024, Digital Consulting Service LLC (Mongolia)
# License: GNU General Public License v3
# pyright: reportMissingImports=false, reportAttributeAccessIssue=false, reportArgumentType=false

"""
AFIP Settings DocType

Manages configuration for AFIP web service integration.
"""

import asyncio

import frappe
from frappe import _
from frappe.model.document import Document
from stdnum.ar import cuit as cuit_number
from stdnum.exceptions import ValidationError


class AFIPSettings(Document):
	"""
	AFIP Settings - Configuration for the Argentine tax authority web services

	Environments:
	- Testing: homologation servers (wswhomo / awshomo)
	- Production: live servers (servicios1 / aws)

	Authentication:
	- Access tickets (token/sign) come from the afip_ticket_provider hook
	"""

	DEFAULT_TIMEOUT = 30

	def validate(self):
		"""Validate settings before save"""
		if not self.environment:
			self.environment = "Testing"

		if not self.timeout:
			self.timeout = self.DEFAULT_TIMEOUT
		elif self.timeout < 0:
			frappe.throw(_("Timeout must be a positive number of seconds"))

		if self.enabled:
			self.validate_cuit()

	def validate_cuit(self):
		"""Validate and store the CUIT without separators"""
		if not self.cuit:
			frappe.throw(_("CUIT is required"))

		try:
			self.cuit = cuit_number.validate(self.cuit)
		except ValidationError:
			frappe.throw(_("CUIT {0} is not valid").format(self.cuit))

	@frappe.whitelist()
	def test_connection(self):
		"""
		Ask AFIP servers for their status.

		Returns:
			dict: Connection status per service
		"""
		if not self.enabled:
			return {"success": False, "message": _("AFIP integration is not enabled")}

		from afip.api.health import get_server_status

		checks = asyncio.run(get_server_status(self))
		success = all(c.get("status") == "healthy" for c in checks.values())

		return {
			"success": success,
			"message": _("Connection successful") if success else _("Some AFIP services are not available"),
			"checks": checks
		}

	def get_formatted_cuit(self):
		"""CUIT as XX-XXXXXXXX-X"""
		return cuit_number.format(self.cuit) if self.cuit else None
