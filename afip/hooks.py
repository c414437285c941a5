# -*- coding: utf-8 -*-
# Copyright (c) 2024, Digital Consulting Service LLC (Mongolia)
# License: GNU General Public License v3

"""
AFIP - Argentine tax authority web services for Frappe

- Electronic billing (wsfe): vouchers, CAE, CAEA and reference data
- Taxpayer registry (ws_sr_padron_a4): taxpayer lookup by CUIT
"""

app_name = "afip"
app_title = "AFIP"
app_publisher = "Digital Consulting Service LLC (Mongolia)"
app_description = "Client for AFIP (Argentina) electronic billing and taxpayer registry web services"
app_email = "dev@frappe.mn"
app_license = "gpl-3.0"

required_apps = ["frappe"]

# Access tickets
# --------------
# AFIP access tickets (token/sign) are issued by WSAA. Register a callable
# (service, settings) -> {"token": ..., "sign": ...} from the app that
# manages certificates and tickets. The last registered provider is used.

# afip_ticket_provider = "my_app.wsaa.get_ticket"

# Includes in <head>
# ------------------

# include js, css files in header of desk.html
# app_include_css = "/assets/afip/css/afip.css"
# app_include_js = "/assets/afip/js/afip.js"

# Document Events
# ---------------
# Hook on document methods and events

# doc_events = {
# 	"Sales Invoice": {
# 		"on_submit": "my_app.billing.create_voucher_for_invoice"
# 	}
# }
