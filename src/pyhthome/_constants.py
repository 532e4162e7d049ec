"""Internal constants shared across the library."""

BASE_URL = "https://www2.hthomeservice.com/"
USER_AGENT = "Mozilla/5.0 (pyhthome)"

# Passphrase the web client uses to encrypt the login ID and password.
CREDENTIAL_PASSPHRASE = "hTsEcret"
CLIENT_ID = "HT-WEB"

LOGIN_ENDPOINT = "login"
HOUSEHOLD_ENDPOINT = "proxy/bearer/api/v1/user/danji/household"
AUTHORIZE_ENDPOINT = "getctoctoken"
DEVICES_ENDPOINT = "proxy/ctoc/devices"
DEVICE_ENDPOINT_PREFIX = "proxy/ctoc"

# ------------------------------------------------------------------
# Login error codes
# ------------------------------------------------------------------

LOGIN_INVALID_CREDENTIALS = 104
LOGIN_ACCESS_DENIED = 107
LOGIN_UNUSUAL_ACTIVITY = 108

#: Failed attempts before the vendor locks the account for five minutes.
LOGIN_MAX_ATTEMPTS = 5
