#!/usr/bin/env python3
"""
Base Data Provider

Defines the capability interface the query handlers depend on: one method per
API category, each taking a request dict and returning a response dict with
the fields that category's template consumes. Implementations must never
raise past their own fallback boundary.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Tuple

Request = Dict[str, Any]
Response = Dict[str, Any]

# Top-level keys each operation's response must carry for the formatters.
RESPONSE_KEYS: Dict[str, Tuple[str, ...]] = {
    "get_loan_limits": ("state", "county", "limits", "highCostArea", "source", "effectiveDate"),
    "get_housing_pulse": ("region", "dataDate", "metrics", "trends", "source"),
    "get_manufactured_housing": ("state", "source"),
    "get_opportunity_zones": ("totalZones", "zones"),
    "get_investor_data": ("dataType", "asOfDate", "records", "totalRecords"),
    "get_construction_spending": ("section", "path", "unit", "values", "source"),
    "loan_lookup": ("ownedByFannieMae", "message"),
    "ami_lookup": ("areaMedianIncome", "amiPercentage", "incomeLimit80AMI", "homeReadyEligible", "eligiblePrograms"),
    "submit_property_data": ("submissionId", "status", "estimatedValue"),
    "get_appraisal_findings": ("documentFileId", "cuRiskScore", "riskLevel", "flags"),
    "get_du_messages": ("casefileId", "recommendation", "messages"),
    "get_loan_pricing": ("pricingDate", "basePrice", "adjustedPrice", "srpPrice", "netPrice", "llpaDetails", "eligibilityStatus"),
    "get_mission_score": ("missionScore", "missionCriteriaShare", "missionDensityScore", "componentScores", "eligibleForIncentives"),
    "get_srp_pricing": ("srpIndicativePrice", "srpPriceDate", "servicingValue", "priceBreakdown", "commitmentOptions"),
    "evaluate_mi_termination": ("eligible", "terminationType", "currentLtv", "message"),
    "check_hilo_eligibility": ("eligible", "currentLtv", "message"),
}

# Keys the formatters read inside nested objects. Fields in OBJECT_FIELDS are
# single objects; the rest are lists checked item by item. Fields not listed
# in RESPONSE_KEYS are optional and only checked when present.
OBJECT_FIELDS = frozenset({"limits", "metrics", "trends", "nationalTotals"})

NESTED_KEYS: Dict[str, Dict[str, Tuple[str, ...]]] = {
    "get_loan_limits": {"limits": ("oneUnit", "twoUnit", "threeUnit", "fourUnit")},
    "get_housing_pulse": {
        "metrics": ("medianHomePrice", "homePriceYoY", "inventoryMonths", "daysOnMarket", "mortgageRate30Yr",
                    "mortgageRate15Yr", "affordabilityIndex", "newListings", "pendingSales", "closedSales"),
        "trends": ("priceDirection", "inventoryDirection", "demandLevel", "marketTemperature"),
    },
    "get_manufactured_housing": {
        "nationalTotals": ("totalCommunities", "totalUnits", "statesReporting"),
        "stateBreakdown": ("state", "communities", "units", "avgUnitsPerCommunity"),
    },
    "get_opportunity_zones": {"zones": ("tractId", "designation", "population", "povertyRate", "medianFamilyIncome")},
    "get_investor_data": {
        "records": ("poolNumber", "cusip", "securityType", "couponRate", "wac", "wam", "loanCount"),
    },
    "get_construction_spending": {"values": ("period", "value")},
    "get_appraisal_findings": {"flags": ("code", "description")},
    "get_du_messages": {"messages": ()},
    "get_loan_pricing": {"llpaDetails": ("adjustmentName", "riskFactor", "adjustmentValue")},
    "get_mission_score": {
        "componentScores": ("dimension", "score", "criteriaMetCount", "totalCriteria"),
        "incentiveDetails": ("incentiveType", "incentiveValue", "description"),
    },
    "get_srp_pricing": {
        "priceBreakdown": ("component", "value", "description"),
        "commitmentOptions": ("commitmentPeriod", "price", "expirationDate"),
    },
}


def missing_fields(operation: str, payload: Response) -> List[str]:
    """
    List the fields a response lacks for its formatter

    Args:
        operation: Name of the DataProvider method that produced the payload
        payload: The response dict

    Returns:
        Dotted paths of missing or malformed fields, e.g. "metrics.homePriceYoY"
        or "zones[2].tractId"; empty when the payload is complete
    """
    required = RESPONSE_KEYS[operation]
    missing = [key for key in required if key not in payload]

    for field, keys in NESTED_KEYS.get(operation, {}).items():
        value = payload.get(field)
        if value is None and field not in required:
            continue
        if field in missing:
            continue

        if field in OBJECT_FIELDS:
            if not isinstance(value, dict):
                missing.append(field)
                continue
            missing.extend(f"{field}.{key}" for key in keys if key not in value)
        elif isinstance(value, list):
            for index, item in enumerate(value):
                if not isinstance(item, dict):
                    missing.append(f"{field}[{index}]")
                    continue
                missing.extend(f"{field}[{index}].{key}" for key in keys if key not in item)
        else:
            missing.append(field)

    return missing


class DataProvider(ABC):
    """
    Abstract base class for mortgage data providers.
    """

    # Public market data -----------------------------------------------------

    @abstractmethod
    def get_loan_limits(self, request: Request) -> Response:
        """Conforming loan limits for {state, county}"""

    @abstractmethod
    def get_housing_pulse(self, request: Request) -> Response:
        """Housing market metrics for {state}; national when state is empty"""

    @abstractmethod
    def get_manufactured_housing(self, request: Request) -> Response:
        """Manufactured housing statistics for {state}; national overview when empty"""

    @abstractmethod
    def get_opportunity_zones(self, request: Request) -> Response:
        """Qualified opportunity zones for {state, county}"""

    @abstractmethod
    def get_investor_data(self, request: Request) -> Response:
        """MBS security records for {dataType, poolNumber, cusip}"""

    @abstractmethod
    def get_construction_spending(self, request: Request) -> Response:
        """Monthly construction spending for {section, sector, subsector}"""

    # Originating & underwriting ---------------------------------------------

    @abstractmethod
    def loan_lookup(self, request: Request) -> Response:
        pass

    @abstractmethod
    def ami_lookup(self, request: Request) -> Response:
        pass

    @abstractmethod
    def submit_property_data(self, request: Request) -> Response:
        pass

    @abstractmethod
    def get_appraisal_findings(self, request: Request) -> Response:
        pass

    @abstractmethod
    def get_du_messages(self, request: Request) -> Response:
        pass

    # Pricing & execution ----------------------------------------------------

    @abstractmethod
    def get_loan_pricing(self, request: Request) -> Response:
        pass

    @abstractmethod
    def get_mission_score(self, request: Request) -> Response:
        pass

    @abstractmethod
    def get_srp_pricing(self, request: Request) -> Response:
        pass

    # Servicing --------------------------------------------------------------

    @abstractmethod
    def evaluate_mi_termination(self, request: Request) -> Response:
        pass

    @abstractmethod
    def check_hilo_eligibility(self, request: Request) -> Response:
        pass
