# -*- coding: utf-8 -*-
# Copyright (c) 2024, Digital Consulting Service LLC (Mongolia)
# License: GNU General Public License v3

"""
Configuration Validation for AFIP

Validates AFIP Settings and provides configuration helpers.
"""

from dataclasses import dataclass

import frappe
from frappe import _
from stdnum.ar import cuit as cuit_number


ENVIRONMENTS = ("Production", "Testing")


@dataclass
class ConfigIssue:
    """Configuration issue"""
    field: str
    message: str
    severity: str = "error"


@dataclass
class ConfigValidationResult:
    """Result of configuration validation"""
    is_valid: bool
    issues: list[ConfigIssue]

    def get_errors(self) -> list[ConfigIssue]:
        return [i for i in self.issues if i.severity == "error"]

    def get_warnings(self) -> list[ConfigIssue]:
        return [i for i in self.issues if i.severity == "warning"]


class ConfigValidator:
    """Validates AFIP configuration"""

    SETTINGS_DOCTYPE = "AFIP Settings"

    def validate(self, settings=None) -> ConfigValidationResult:
        """Validate all configuration"""
        issues: list[ConfigIssue] = []

        if settings is None:
            if not self._settings_exist():
                issues.append(ConfigIssue(
                    field="settings",
                    message=_("AFIP Settings not found. Please configure the app."),
                    severity="error"
                ))
                return ConfigValidationResult(is_valid=False, issues=issues)

            settings = frappe.get_single(self.SETTINGS_DOCTYPE)

        if not settings.enabled:
            issues.append(ConfigIssue(
                field="enabled",
                message=_("AFIP integration is disabled"),
                severity="info"
            ))
            return ConfigValidationResult(is_valid=True, issues=issues)

        issues.extend(self._validate_cuit(settings))
        issues.extend(self._validate_environment(settings))
        issues.extend(self._validate_timeout(settings))
        issues.extend(self._validate_ticket_provider())

        is_valid = len([i for i in issues if i.severity == "error"]) == 0
        return ConfigValidationResult(is_valid=is_valid, issues=issues)

    def _settings_exist(self) -> bool:
        try:
            frappe.get_single(self.SETTINGS_DOCTYPE)
            return True
        except frappe.DoesNotExistError:
            return False

    def _validate_cuit(self, settings) -> list[ConfigIssue]:
        if not settings.cuit:
            return [ConfigIssue(
                field="cuit",
                message=_("CUIT is required")
            )]

        if not cuit_number.is_valid(settings.cuit):
            return [ConfigIssue(
                field="cuit",
                message=_("CUIT {0} is not valid").format(settings.cuit)
            )]

        return []

    def _validate_environment(self, settings) -> list[ConfigIssue]:
        if settings.environment not in ENVIRONMENTS:
            return [ConfigIssue(
                field="environment",
                message=_("Environment must be one of {0}").format(", ".join(ENVIRONMENTS))
            )]

        if settings.environment == "Testing":
            return [ConfigIssue(
                field="environment",
                message=_("Using AFIP homologation servers. Vouchers are not valid for tax purposes."),
                severity="info"
            )]

        return []

    def _validate_timeout(self, settings) -> list[ConfigIssue]:
        if settings.timeout is not None and settings.timeout <= 0:
            return [ConfigIssue(
                field="timeout",
                message=_("Timeout must be a positive number of seconds")
            )]
        return []

    def _validate_ticket_provider(self) -> list[ConfigIssue]:
        if not frappe.get_hooks("afip_ticket_provider"):
            return [ConfigIssue(
                field="afip_ticket_provider",
                message=_("No access ticket provider registered. Calls other than server status will fail."),
                severity="warning"
            )]
        return []


def validate_config(settings=None) -> ConfigValidationResult:
    return ConfigValidator().validate(settings)


def get_config_status() -> dict:
    result = validate_config()
    return {
        "valid": result.is_valid,
        "errors": [{"field": i.field, "message": i.message} for i in result.get_errors()],
        "warnings": [{"field": i.field, "message": i.message} for i in result.get_warnings()]
    }


@frappe.whitelist()
def check_configuration():
    """Check AFIP configuration status"""
    frappe.only_for(["System Manager", "Administrator"])
    return get_config_status()
