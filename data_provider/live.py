#!/usr/bin/env python3
"""
Live Data Provider

Calls the upstream Fannie Mae APIs. The Exchange market-data endpoints are
public; everything else is authenticated with an OAuth bearer token.

Any failure (transport error, non-2xx status, token failure, or a payload
missing the fields the templates need) is logged and answered with the
synthetic payload for the same request, so callers always get a
well-formed response.
"""

import logging
from typing import Any, Dict, NamedTuple, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

import project_config
from data_provider.auth import TokenManager
from data_provider.base import DataProvider, Request, Response, missing_fields
from data_provider.exceptions import DataProviderError, UpstreamError
from data_provider.synthetic import SyntheticDataProvider

logger = logging.getLogger("data-provider")


class Endpoint(NamedTuple):
    method: str
    path: str
    public: bool = False


ENDPOINTS: Dict[str, Endpoint] = {
    "get_loan_limits": Endpoint("GET", "/v1/loan-limits", public=True),
    "get_housing_pulse": Endpoint("GET", "/v1/housing-pulse", public=True),
    "get_manufactured_housing": Endpoint("GET", "/v1/manufactured-housing", public=True),
    "get_opportunity_zones": Endpoint("GET", "/v1/opportunity-zones"),
    "get_investor_data": Endpoint("GET", "/v1/investor/securities"),
    "get_construction_spending": Endpoint("GET", "/v1/construction-spending/section"),
    "loan_lookup": Endpoint("POST", "/v1/loan-lookup"),
    "ami_lookup": Endpoint("POST", "/v1/ami-lookup"),
    "submit_property_data": Endpoint("POST", "/v1/uniform-property-data"),
    "get_appraisal_findings": Endpoint("GET", "/v1/appraisal-findings"),
    "get_du_messages": Endpoint("GET", "/v1/du-messages"),
    "get_loan_pricing": Endpoint("POST", "/v1/loan-pricing"),
    "get_mission_score": Endpoint("POST", "/v1/mission-score"),
    "get_srp_pricing": Endpoint("POST", "/v1/srp-pricing"),
    "evaluate_mi_termination": Endpoint("POST", "/v1/mi-termination"),
    "check_hilo_eligibility": Endpoint("POST", "/v1/hilo-eligibility"),
}


def build_retry_session() -> requests.Session:
    """
    Build a requests Session with conservative retries on transient failures.
    """
    session = requests.Session()

    retry = Retry(
        total=project_config.MAX_RETRIES,
        connect=project_config.MAX_RETRIES,
        read=project_config.MAX_RETRIES,
        status=project_config.MAX_RETRIES,
        backoff_factor=0.5,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=frozenset({"GET", "POST"}),
        raise_on_status=False,
    )

    adapter = HTTPAdapter(max_retries=retry, pool_connections=10, pool_maxsize=10)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    session.headers.update({"Accept": "application/json"})

    return session


class LiveDataProvider(DataProvider):
    """
    Data provider backed by the upstream HTTP APIs, with synthetic fallback.
    """

    def __init__(self, session: requests.Session = None, token_manager: TokenManager = None,
                 fallback: DataProvider = None, api_base: str = None, exchange_base: str = None,
                 timeout: float = None):
        self.session = session or build_retry_session()
        self.token_manager = token_manager or TokenManager(self.session)
        self.fallback = fallback or SyntheticDataProvider()
        self.api_base = (api_base or project_config.FANNIEMAE_API_BASE).rstrip("/")
        self.exchange_base = (exchange_base or project_config.EXCHANGE_API_BASE).rstrip("/")
        self.timeout = timeout or project_config.REQUEST_TIMEOUT

    # Transport ---------------------------------------------------------------

    def _call(self, operation: str, request: Request, path: Optional[str] = None) -> Response:
        """
        Perform one upstream call, falling back to synthetic data on any failure

        Args:
            operation: Name of the DataProvider method being served
            request: The outbound request dict
            path: Override for the endpoint path

        Returns:
            The upstream payload, or the synthetic payload for the same request
        """
        try:
            return self._request(operation, request, path)
        except DataProviderError as e:
            logger.warning(f"⚠️ {operation} upstream call failed, serving synthetic data: {e}")
            return getattr(self.fallback, operation)(request)

    def _request(self, operation: str, request: Request, path: Optional[str]) -> Response:
        endpoint = ENDPOINTS[operation]
        base = self.exchange_base if endpoint.public else self.api_base
        url = f"{base}{path or endpoint.path}"

        headers = {}
        if not endpoint.public:
            headers["Authorization"] = f"Bearer {self.token_manager.get_token()}"

        kwargs: Dict[str, Any] = {"headers": headers, "timeout": self.timeout}
        if endpoint.method == "GET":
            kwargs["params"] = {
                key: value for key, value in request.items()
                if key != "referenceIdentifier" and value not in (None, "")
            }
        else:
            kwargs["json"] = request

        logger.debug(f"{endpoint.method} {url}")
        try:
            response = self.session.request(endpoint.method, url, **kwargs)
        except requests.exceptions.RequestException as e:
            raise UpstreamError(f"request to {url} failed: {e}") from e

        if response.status_code == 401 and not endpoint.public:
            self.token_manager.invalidate()
        if not response.ok:
            raise UpstreamError(f"{url} returned {response.status_code}", status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamError(f"{url} returned a non-JSON body") from e

        # Some endpoints wrap the result in {"success": ..., "data": {...}}
        if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
            payload = payload["data"]
        if not isinstance(payload, dict):
            raise UpstreamError(f"{url} returned {type(payload).__name__}, expected an object")

        missing = missing_fields(operation, payload)
        if missing:
            raise UpstreamError(f"{url} response missing {', '.join(missing)}")

        return payload

    # Public market data -----------------------------------------------------

    def get_loan_limits(self, request: Request) -> Response:
        return self._call("get_loan_limits", request)

    def get_housing_pulse(self, request: Request) -> Response:
        return self._call("get_housing_pulse", request)

    def get_manufactured_housing(self, request: Request) -> Response:
        return self._call("get_manufactured_housing", request)

    def get_opportunity_zones(self, request: Request) -> Response:
        return self._call("get_opportunity_zones", request)

    def get_investor_data(self, request: Request) -> Response:
        return self._call("get_investor_data", request)

    def get_construction_spending(self, request: Request) -> Response:
        # The series is addressed by the deepest level of the path
        if request.get("subsector"):
            level = "subsector"
        elif request.get("sector"):
            level = "sector"
        else:
            level = "section"
        return self._call("get_construction_spending", request, path=f"/v1/construction-spending/{level}")

    # Originating & underwriting ---------------------------------------------

    def loan_lookup(self, request: Request) -> Response:
        return self._call("loan_lookup", request)

    def ami_lookup(self, request: Request) -> Response:
        return self._call("ami_lookup", request)

    def submit_property_data(self, request: Request) -> Response:
        return self._call("submit_property_data", request)

    def get_appraisal_findings(self, request: Request) -> Response:
        return self._call("get_appraisal_findings", request)

    def get_du_messages(self, request: Request) -> Response:
        return self._call("get_du_messages", request)

    # Pricing & execution ----------------------------------------------------

    def get_loan_pricing(self, request: Request) -> Response:
        return self._call("get_loan_pricing", request)

    def get_mission_score(self, request: Request) -> Response:
        return self._call("get_mission_score", request)

    def get_srp_pricing(self, request: Request) -> Response:
        return self._call("get_srp_pricing", request)

    # Servicing --------------------------------------------------------------

    def evaluate_mi_termination(self, request: Request) -> Response:
        return self._call("evaluate_mi_termination", request)

    def check_hilo_eligibility(self, request: Request) -> Response:
        return self._call("check_hilo_eligibility", request)

    # Diagnostics ------------------------------------------------------------

    def probe(self, url: str, authenticated: bool = False) -> Dict[str, Any]:
        """
        Issue a raw GET and summarise the outcome for the connection test

        Never falls back: the result reports exactly what the upstream did.
        """
        try:
            headers = {}
            if authenticated:
                headers["Authorization"] = f"Bearer {self.token_manager.get_token()}"
            response = self.session.get(url, headers=headers, timeout=self.timeout)
        except (DataProviderError, requests.exceptions.RequestException) as e:
            return {"success": False, "error": str(e)}

        return {
            "success": response.ok,
            "status": response.status_code,
            "dataPreview": response.text[:200],
        }
