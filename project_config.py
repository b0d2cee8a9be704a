# Project Configuration Module
# Handles environment settings, data provider selection and per-category
# request defaults for the mortgage data chat service.

import os
import logging
from typing import Dict, Any

from dotenv import load_dotenv

# ---------------------------------------------------------------------------
# PROJECT CONFIGURATION
# Values are read once at import time from the process environment, after
# loading an optional .env file from the working directory.
#
# Data Provider endpoints:
#   - The Exchange public API (loan limits, housing pulse, manufactured housing)
#   - Authenticated Fannie Mae API (everything else, OAuth client credentials)
# ---------------------------------------------------------------------------

load_dotenv()

logger = logging.getLogger(__name__)

# Credentials and endpoints ----------------------------------------------------------------------

FANNIEMAE_TOKEN_URL: str = os.getenv("FANNIEMAE_TOKEN_URL", "https://fmsso-api.fanniemae.com/as/token.oauth2")
FANNIEMAE_CLIENT_ID: str = os.getenv("FANNIEMAE_CLIENT_ID", "")
FANNIEMAE_CLIENT_SECRET: str = os.getenv("FANNIEMAE_CLIENT_SECRET", "")
FANNIEMAE_API_BASE: str = os.getenv("FANNIEMAE_API_BASE", "https://api.fanniemae.com").rstrip("/")
EXCHANGE_API_BASE: str = os.getenv("EXCHANGE_API_BASE", "https://api.theexchange.fanniemae.com").rstrip("/")

# "live" calls the upstream API and falls back to synthetic data on failure;
# "synthetic" never leaves the process. Live is only the default when
# credentials are configured.
DATA_PROVIDER: str = os.getenv(
    "DATA_PROVIDER", "live" if FANNIEMAE_CLIENT_ID and FANNIEMAE_CLIENT_SECRET else "synthetic"
).lower()

# Transport settings
REQUEST_TIMEOUT: float = float(os.getenv("REQUEST_TIMEOUT", "10"))
MAX_RETRIES: int = int(os.getenv("MAX_RETRIES", "2"))
TOKEN_EXPIRY_MARGIN: int = int(os.getenv("TOKEN_EXPIRY_MARGIN", "60"))  # seconds

# Service settings
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"
PORT: int = int(os.getenv("PORT", "5001"))

# As-of date stamped on synthetic payloads so they stay reproducible.
SYNTHETIC_AS_OF: str = os.getenv("SYNTHETIC_AS_OF", "2025-01-15")

# Request defaults -------------------------------------------------------------------------------

# Optional outbound fields per category. Explicit values extracted from the
# query are merged over these; empty strings and zeros never override a default.
REQUEST_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "loan_limits": {
        "county": "",
    },
    "investor_tools": {
        "dataType": "POOL_DATA",
    },
    "construction_spending": {
        "section": "Total",
    },
    "loan_lookup": {
        "propertyStreetAddress": "",
        "propertyCity": "",
        "propertyZipCode": "",
    },
    "ami_homeready": {
        "propertyCounty": "Metro",
    },
    "property_data": {
        "propertyType": "SINGLE_FAMILY",
        "propertyCity": "",
        "propertyState": "",
        "propertyZipCode": "",
    },
    "loan_pricing": {
        "noteRate": 6.5,
        "loanTerm": 360,
        "ltv": 80,
        "cltv": 80,
        "loanPurpose": "PURCHASE",
        "propertyType": "SINGLE_FAMILY",
        "occupancyType": "PRIMARY_RESIDENCE",
        "propertyState": "CA",
        "propertyCounty": "Los Angeles",
        "deliveryType": "CASH",
    },
    "mission_score": {
        "loanAmount": 350000,
        "borrowerIncome": 75000,
        "propertyCounty": "Metro",
        "propertyZipCode": "00000",
    },
    "srp_pricing": {
        "loanAmount": 300000,
        "noteRate": 6.5,
        "loanTerm": 360,
        "loanPurpose": "PURCHASE",
        "propertyType": "SINGLE_FAMILY",
        "occupancyType": "PRIMARY_RESIDENCE",
        "ltv": 80,
        "creditScore": 740,
        "servicingRetained": False,
    },
    "mi_termination": {
        "loanAmount": 300000,
        "originalLtv": 95,
        "paymentHistory": "CURRENT",
    },
    "hilo_eligibility": {
        "loanAmount": 300000,
        "creditScore": 700,
        "occupancyType": "PRIMARY_RESIDENCE",
    },
}

# Prefix of the caller-generated referenceIdentifier sent with each request.
REFERENCE_PREFIXES: Dict[str, str] = {
    "loan_lookup": "lookup",
    "ami_homeready": "ami",
    "property_data": "upd",
    "appraisal_findings": "appraisal",
    "du_messages": "du",
    "loan_pricing": "pricing",
    "mission_score": "mission",
    "srp_pricing": "srp",
    "mi_termination": "mi",
    "hilo_eligibility": "hilo",
}


def get_request_defaults(category: str) -> Dict[str, Any]:
    """Return a fresh copy of the request defaults for *category*."""
    return dict(REQUEST_DEFAULTS.get(category, {}))


def describe_environment() -> Dict[str, Any]:
    """Summarise which upstream settings are present without leaking secrets."""
    return {
        "hasClientId": bool(FANNIEMAE_CLIENT_ID),
        "hasClientSecret": bool(FANNIEMAE_CLIENT_SECRET),
        "tokenUrl": FANNIEMAE_TOKEN_URL,
        "apiBase": FANNIEMAE_API_BASE,
        "exchangeBase": EXCHANGE_API_BASE,
        "dataProvider": DATA_PROVIDER,
    }
