"""API-related constants."""

# HTTP Headers
X_FRAME_OPTIONS_HEADER = "X-Frame-Options"
CSP_HEADER = "Content-Security-Policy"
CSP_REPORT_ONLY_HEADER = "Content-Security-Policy-Report-Only"
HSTS_HEADER = "Strict-Transport-Security"
X_CONTENT_TYPE_OPTIONS_HEADER = "X-Content-Type-Options"
HOST_HEADER = "host"
INSTALLATION_ID_HEADER = "X-Installation-ID"

# Asynchronous browser requests
X_REQUESTED_WITH_HEADER = "X-Requested-With"
XHR_REQUESTED_WITH = "XMLHttpRequest"

# Fault responses
FAULT_APOLOGY_MESSAGE = "Sorry, the server ran into a problem processing this request."
