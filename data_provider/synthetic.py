#!/usr/bin/env python3
"""
Synthetic Data Provider

Produces well-formed, deterministic payloads for every API category without
leaving the process. It is the fallback behind the live provider and the
default provider when no upstream credentials are configured.

Each payload is derived from the request's domain fields only: the same
request always yields the same response, whatever its referenceIdentifier.
"""

import random
import zlib
from datetime import date, timedelta
from typing import Any, Dict, List, Tuple

import project_config
from data_provider.base import DataProvider, Request, Response

# 2025 conforming loan limits (1-4 units)
BASELINE_LIMITS: Dict[str, int] = {"oneUnit": 806500, "twoUnit": 1032650, "threeUnit": 1248150, "fourUnit": 1551250}
HIGH_COST_LIMITS: Dict[str, int] = {"oneUnit": 1209750, "twoUnit": 1548975, "threeUnit": 1872225, "fourUnit": 2326875}

# Statutory high-cost states use the ceiling everywhere.
HIGH_COST_STATES = frozenset({"AK", "HI"})
HIGH_COST_COUNTIES = frozenset({
    ("CA", "los angeles"), ("CA", "orange"), ("CA", "san francisco"), ("CA", "san mateo"),
    ("CA", "santa clara"), ("CA", "alameda"), ("CA", "marin"), ("CA", "contra costa"),
    ("CA", "santa cruz"), ("CA", "ventura"), ("CA", "san diego"), ("NY", "new york"),
    ("NY", "kings"), ("NY", "queens"), ("NY", "bronx"), ("NY", "richmond"), ("NY", "nassau"),
    ("NY", "westchester"), ("NJ", "bergen"), ("NJ", "hudson"), ("DC", "district of columbia"),
    ("VA", "arlington"), ("VA", "fairfax"), ("MD", "montgomery"), ("WA", "king"),
    ("WA", "snohomish"), ("MA", "middlesex"), ("MA", "suffolk"), ("CO", "boulder"),
    ("UT", "summit"), ("WY", "teton"), ("FL", "monroe"), ("TN", "williamson"),
})

AREA_MEDIAN_INCOME: Dict[str, int] = {
    "CA": 125000, "TX": 85000, "FL": 78000, "NY": 115000, "WA": 105000,
    "MA": 126000, "NJ": 118000, "MD": 121000, "VA": 112000, "DC": 154000,
    "CO": 110000, "IL": 98000, "AZ": 86000, "GA": 88000, "NC": 84000,
}
DEFAULT_AREA_MEDIAN_INCOME = 90000

MEDIAN_HOME_PRICE: Dict[str, int] = {
    "CA": 785000, "TX": 335000, "FL": 405000, "NY": 495000, "WA": 610000,
    "MA": 640000, "CO": 560000, "AZ": 435000, "NV": 445000, "GA": 345000,
}
DEFAULT_MEDIAN_HOME_PRICE = 412000

MANUFACTURED_HOUSING: Dict[str, Tuple[int, int]] = {
    "CA": (4521, 523000), "FL": (3256, 445000), "TX": (2847, 312500),
    "NC": (1876, 234000), "AZ": (1523, 198000), "MI": (1412, 176500),
    "PA": (1398, 121000), "GA": (1187, 118400),
}

# Seasonally adjusted annual rate, millions of dollars
CONSTRUCTION_TOTALS: Dict[str, float] = {"Total": 2152300.0, "Private": 1650900.0, "Public": 501400.0}
CONSTRUCTION_SECTOR_SHARE: Dict[str, float] = {"Residential": 0.56, "Nonresidential": 0.44}

# Credit score / LTV loan-level price adjustment grid (purchase), in points
LTV_BUCKETS: List[Tuple[float, str]] = [
    (60, "≤60%"), (70, "60.01-70%"), (75, "70.01-75%"), (80, "75.01-80%"),
    (85, "80.01-85%"), (90, "85.01-90%"), (95, "90.01-95%"), (200, ">95%"),
]
CREDIT_SCORE_GRID: List[Tuple[int, str, List[float]]] = [
    (780, "≥780", [0.000, 0.000, 0.000, 0.375, 0.375, 0.250, 0.250, 0.125]),
    (760, "760-779", [0.000, 0.250, 0.250, 0.625, 0.625, 0.500, 0.500, 0.250]),
    (740, "740-759", [0.000, 0.250, 0.500, 0.875, 1.000, 0.750, 0.625, 0.500]),
    (720, "720-739", [0.000, 0.250, 0.750, 1.250, 1.250, 1.000, 0.875, 0.750]),
    (700, "700-719", [0.000, 0.375, 0.875, 1.375, 1.500, 1.250, 1.125, 0.875]),
    (680, "680-699", [0.000, 0.625, 1.125, 1.750, 1.875, 1.500, 1.375, 1.125]),
    (660, "660-679", [0.000, 0.750, 1.375, 1.875, 2.125, 1.750, 1.625, 1.250]),
    (640, "640-659", [0.000, 1.125, 1.500, 2.250, 2.500, 2.000, 1.875, 1.500]),
    (0, "<640", [0.000, 1.500, 2.125, 2.750, 2.875, 2.625, 2.250, 1.750]),
]

SRP_BASE_PRICE = 1.100

MI_AUTOMATIC_THRESHOLD = 78
MI_BORROWER_REQUEST_THRESHOLD = 80
HILO_MIN_LTV = {"PRIMARY_RESIDENCE": 97, "SECOND_HOME": 90, "INVESTMENT": 75}

SERVICERS = [
    "Wells Fargo Home Mortgage", "Rocket Mortgage", "PennyMac Loan Services",
    "Mr. Cooper", "U.S. Bank Home Mortgage", "Freedom Mortgage",
]

DU_RECOMMENDATIONS = [
    "Approve/Eligible", "Approve/Ineligible", "Refer/Eligible", "Refer with Caution", "Out of Scope",
]

CU_FLAGS = [
    ("CU0001", "Overvaluation risk relative to comparable sales"),
    ("CU0002", "Comparable selection differs from model-preferred comparables"),
    ("CU0003", "Gross living area adjustment outside typical range"),
    ("CU0004", "Market conditions reported as stable while trend indicates decline"),
    ("CU0005", "Condition rating inconsistent with prior appraisal"),
]


def _rng(*parts: Any) -> random.Random:
    """Random generator seeded from the given domain fields"""
    key = "|".join(str(part).strip().lower() for part in parts)
    return random.Random(zlib.crc32(key.encode("utf-8")))


def _as_of() -> date:
    return date.fromisoformat(project_config.SYNTHETIC_AS_OF)


def _number(request: Request, key: str, default: float = 0) -> float:
    value = request.get(key)
    if value in (None, ""):
        return default
    return float(value)


def _state(request: Request, *keys: str) -> str:
    for key in keys or ("state",):
        value = request.get(key)
        if value:
            return str(value).upper()
    return ""


def _score_row(credit_score: float) -> Tuple[str, List[float]]:
    for floor, label, row in CREDIT_SCORE_GRID:
        if credit_score >= floor:
            return label, row
    return CREDIT_SCORE_GRID[-1][1], CREDIT_SCORE_GRID[-1][2]


def _ltv_column(ltv: float) -> Tuple[int, str]:
    for index, (ceiling, label) in enumerate(LTV_BUCKETS):
        if ltv <= ceiling:
            return index, label
    return len(LTV_BUCKETS) - 1, LTV_BUCKETS[-1][1]


def area_median_income(state: str, county: str = "") -> int:
    """Area median income for a state, nudged per county"""
    ami = AREA_MEDIAN_INCOME.get(state.upper(), DEFAULT_AREA_MEDIAN_INCOME)
    if county and county.lower() != "metro":
        ami = int(round(ami * _rng("ami", state, county).uniform(0.9, 1.15), -2))
    return ami


class SyntheticDataProvider(DataProvider):
    """
    Deterministic, in-process implementation of every data provider operation.
    """

    # Public market data -----------------------------------------------------

    def get_loan_limits(self, request: Request) -> Response:
        state = _state(request)
        county = request.get("county") or ""
        high_cost = state in HIGH_COST_STATES or (state, county.lower()) in HIGH_COST_COUNTIES
        return {
            "state": state,
            "county": county or "All Counties",
            "year": 2025,
            "limits": dict(HIGH_COST_LIMITS if high_cost else BASELINE_LIMITS),
            "highCostArea": high_cost,
            "source": "Fannie Mae 2025 Conforming Loan Limits",
            "effectiveDate": "2025-01-01",
        }

    def get_housing_pulse(self, request: Request) -> Response:
        state = _state(request)
        region = state or "National"
        rng = _rng("housing", region)

        base_price = MEDIAN_HOME_PRICE.get(state, DEFAULT_MEDIAN_HOME_PRICE)
        days_on_market = 28 + rng.randint(0, 24)
        inventory = round(3.2 + rng.random() * 1.6, 1)
        yoy = round(1.5 + rng.random() * 4.5, 1)
        scale = 1 if state else 12

        if days_on_market < 32:
            temperature = "Hot"
        elif days_on_market < 42:
            temperature = "Warm"
        else:
            temperature = "Cool"

        return {
            "region": region,
            "dataDate": project_config.SYNTHETIC_AS_OF,
            "metrics": {
                "medianHomePrice": int(round(base_price * rng.uniform(0.96, 1.06), -2)),
                "homePriceYoY": yoy,
                "inventoryMonths": inventory,
                "daysOnMarket": days_on_market,
                "mortgageRate30Yr": round(6.75 + rng.random() * 0.5, 2),
                "mortgageRate15Yr": round(6.0 + rng.random() * 0.5, 2),
                "affordabilityIndex": 92 + rng.randint(0, 20),
                "newListings": (45000 + rng.randint(0, 10000)) * scale // 10,
                "pendingSales": (38000 + rng.randint(0, 8000)) * scale // 10,
                "closedSales": (34000 + rng.randint(0, 7000)) * scale // 10,
            },
            "trends": {
                "priceDirection": "increasing" if yoy >= 2.5 else "stable",
                "inventoryDirection": "increasing" if inventory >= 4.0 else "stable",
                "demandLevel": "high" if days_on_market < 38 else "moderate",
                "marketTemperature": temperature,
            },
            "source": "Fannie Mae Housing Pulse",
        }

    def get_manufactured_housing(self, request: Request) -> Response:
        state = _state(request)
        source = "Fannie Mae Manufactured Housing Data"

        if state:
            if state in MANUFACTURED_HOUSING:
                communities, units = MANUFACTURED_HOUSING[state]
            else:
                rng = _rng("manufactured", state)
                communities = rng.randint(150, 1100)
                units = communities * rng.randint(70, 120)
            return {
                "state": state,
                "communityCount": communities,
                "unitCount": units,
                "avgUnitsPerCommunity": round(units / communities),
                "source": source,
            }

        breakdown = [
            {
                "state": code,
                "communities": communities,
                "units": units,
                "avgUnitsPerCommunity": round(units / communities),
            }
            for code, (communities, units) in sorted(
                MANUFACTURED_HOUSING.items(), key=lambda item: item[1][0], reverse=True
            )[:5]
        ]
        return {
            "state": "",
            "nationalTotals": {"totalCommunities": 43000, "totalUnits": 4200000, "statesReporting": 50},
            "stateBreakdown": breakdown,
            "source": source,
        }

    def get_opportunity_zones(self, request: Request) -> Response:
        state = _state(request)
        county = request.get("county") or ""
        rng = _rng("oz", state, county)

        total = rng.randint(4, 30) if county else rng.randint(40, 880) if state else 8764
        zones = []
        for _ in range(min(total, 5)):
            zones.append({
                "tractId": f"{rng.randint(1, 56):02d}{rng.randint(1, 199):03d}{rng.randint(100, 999999):06d}",
                "designation": rng.choice(["Low-Income Community", "Low-Income Community", "Contiguous Tract"]),
                "population": rng.randint(1200, 7800),
                "povertyRate": round(rng.uniform(18.0, 46.0), 1),
                "medianFamilyIncome": int(round(rng.uniform(28000, 61000), -2)),
            })

        return {
            "state": state,
            "county": county,
            "totalZones": total,
            "zones": zones,
            "source": "CDFI Fund Opportunity Zone Designations",
        }

    def get_investor_data(self, request: Request) -> Response:
        data_type = request.get("dataType") or "POOL_DATA"
        pool_number = request.get("poolNumber") or ""
        cusip = request.get("cusip") or ""

        if pool_number or cusip:
            keys = [pool_number or cusip]
        else:
            keys = [f"sample-{index}" for index in range(5)]

        records = [self._security_record(key, pool_number, cusip) for key in keys]
        return {
            "dataType": data_type,
            "asOfDate": project_config.SYNTHETIC_AS_OF,
            "records": records,
            "totalRecords": len(records),
        }

    def _security_record(self, key: str, pool_number: str, cusip: str) -> Dict[str, Any]:
        rng = _rng("security", key)
        coupon = rng.choice([2.0, 2.5, 3.0, 3.5, 4.0, 4.5, 5.0, 5.5, 6.0])
        return {
            "poolNumber": pool_number or f"FN{rng.randint(100000, 999999)}",
            "cusip": cusip or f"3140{rng.choice('ABCDEFGHJKLMNPQRSTUVWXYZ')}{rng.randint(1000, 9999)}",
            "securityType": rng.choice(["UMBS 30-Year", "UMBS 15-Year", "UMBS 20-Year"]),
            "couponRate": coupon,
            "wac": round(coupon + rng.uniform(0.55, 0.95), 2),
            "wam": rng.randint(180, 357),
            "loanCount": rng.randint(40, 2400),
        }

    def get_construction_spending(self, request: Request) -> Response:
        section = request.get("section") or "Total"
        sector = request.get("sector") or ""
        subsector = request.get("subsector") or ""
        path = " > ".join(part for part in (section, sector, subsector) if part)

        level = CONSTRUCTION_TOTALS.get(section, CONSTRUCTION_TOTALS["Total"])
        if sector:
            level *= CONSTRUCTION_SECTOR_SHARE.get(sector, 0.5)
        rng = _rng("construction", path)
        if subsector:
            level *= rng.uniform(0.03, 0.35)

        values = []
        month = _as_of().replace(day=1)
        for _ in range(6):
            month = (month - timedelta(days=1)).replace(day=1)
            values.append({"period": month.strftime("%Y-%m"), "value": round(level * rng.uniform(0.97, 1.03), 1)})

        latest, previous = values[0]["value"], values[1]["value"]
        return {
            "section": section,
            "sector": sector,
            "subsector": subsector,
            "path": path,
            "unit": "Millions of dollars, seasonally adjusted annual rate",
            "values": values,
            "monthOverMonthChange": round((latest - previous) / previous * 100, 1),
            "source": "U.S. Census Bureau Value of Construction Put in Place",
        }

    # Originating & underwriting ---------------------------------------------

    def loan_lookup(self, request: Request) -> Response:
        last_name = request.get("borrowerLastName") or ""
        state = _state(request, "propertyState", "state")
        rng = _rng("lookup", last_name, request.get("propertyStreetAddress"), state, request.get("propertyZipCode"))

        if rng.random() >= 0.6:
            return {
                "ownedByFannieMae": False,
                "message": f"No Fannie Mae-owned loan matched borrower {last_name} in {state}.",
            }

        upb = int(round(rng.uniform(120000, 640000), -2))
        return {
            "ownedByFannieMae": True,
            "fannieMaeLoanNumber": str(rng.randint(1000000000, 9999999999)),
            "servicerName": rng.choice(SERVICERS),
            "currentUPB": upb,
            "noteRate": round(rng.choice([2.875, 3.25, 3.5, 4.125, 4.75, 5.5, 6.25, 6.875, 7.125]), 3),
            "eligibleForRefi": rng.random() < 0.7,
            "eligibleForAppraisalWaiver": rng.random() < 0.5,
            "message": f"Loan for borrower {last_name} in {state} is owned by Fannie Mae.",
        }

    def ami_lookup(self, request: Request) -> Response:
        state = _state(request, "propertyState", "state")
        county = request.get("propertyCounty") or "Metro"
        income = _number(request, "borrowerIncome")

        ami = area_median_income(state, county)
        percentage = round(income / ami * 100)
        eligible = percentage <= 80

        programs = [
            {"programName": "HomeReady", "eligible": eligible},
            {"programName": "HFA Preferred", "eligible": eligible},
            {"programName": "RefiNow", "eligible": percentage <= 100},
            {"programName": "Standard Conforming", "eligible": True},
        ]
        return {
            "state": state,
            "county": county,
            "areaMedianIncome": ami,
            "borrowerIncome": income,
            "amiPercentage": percentage,
            "incomeLimit80AMI": int(round(ami * 0.8)),
            "homeReadyEligible": eligible,
            "eligiblePrograms": programs,
            "message": f"Borrower income is {percentage}% of AMI"
                       + (" - eligible for HomeReady!" if eligible else "."),
        }

    def submit_property_data(self, request: Request) -> Response:
        address = request.get("propertyStreetAddress") or ""
        state = _state(request, "propertyState", "state")
        rng = _rng("upd", address, request.get("propertyCity"), state, request.get("propertyZipCode"))

        value = int(round(MEDIAN_HOME_PRICE.get(state, DEFAULT_MEDIAN_HOME_PRICE) * rng.uniform(0.75, 1.45), -3))
        spread = rng.uniform(0.04, 0.12)
        return {
            "submissionId": f"UPD-{zlib.crc32(address.lower().encode('utf-8')):08X}",
            "status": "ACCEPTED",
            "propertyAddress": address,
            "propertyType": request.get("propertyType") or "SINGLE_FAMILY",
            "estimatedValue": value,
            "valueRangeLow": int(round(value * (1 - spread), -3)),
            "valueRangeHigh": int(round(value * (1 + spread), -3)),
            "confidenceScore": rng.randint(62, 97),
        }

    def get_appraisal_findings(self, request: Request) -> Response:
        file_id = request.get("documentFileId") or ""
        rng = _rng("appraisal", file_id)

        score = round(rng.uniform(1.0, 5.0), 1)
        if score < 2.5:
            risk, flag_count = "Low", 0
        elif score < 3.5:
            risk, flag_count = "Medium", 1
        else:
            risk, flag_count = "High", rng.randint(2, 3)

        flags = [{"code": code, "description": text} for code, text in rng.sample(CU_FLAGS, flag_count)]
        return {
            "documentFileId": file_id,
            "cuRiskScore": score,
            "riskLevel": risk,
            "appraisalWaiverEligible": score <= 2.5,
            "flags": flags,
        }

    def get_du_messages(self, request: Request) -> Response:
        casefile_id = request.get("casefileId") or ""
        rng = _rng("du", casefile_id)

        recommendation = rng.choice(DU_RECOMMENDATIONS)
        messages = [
            {"category": "Verification", "messageText": "Verify the borrower's employment and income per Selling Guide requirements."},
            {"category": "Assets", "messageText": f"Document {rng.randint(2, 6)} months of reserves from the listed accounts."},
        ]
        if recommendation.startswith("Refer"):
            messages.append({"category": "Risk", "messageText": "Loan requires manual underwriting; DTI and credit profile exceed automated limits."})
        if recommendation == "Approve/Ineligible":
            messages.append({"category": "Eligibility", "messageText": "Loan amount exceeds the maximum for the property location."})
        return {"casefileId": casefile_id, "recommendation": recommendation, "messages": messages}

    # Pricing & execution ----------------------------------------------------

    def get_loan_pricing(self, request: Request) -> Response:
        loan_amount = _number(request, "loanAmount")
        note_rate = _number(request, "noteRate", 6.5)
        credit_score = _number(request, "creditScore")
        ltv = _number(request, "ltv", 80)

        base_price = round(99.0 + (note_rate - 6.0) * 2.5, 3)

        score_label, row = _score_row(credit_score)
        column, ltv_label = _ltv_column(ltv)
        llpas = [{
            "adjustmentName": "Credit Score / LTV",
            "riskFactor": f"{score_label} / {ltv_label}",
            "adjustmentValue": -row[column] or 0.0,
        }]

        purpose = request.get("loanPurpose") or "PURCHASE"
        if purpose == "CASHOUT_REFINANCE":
            llpas.append({"adjustmentName": "Cash-Out Refinance", "riskFactor": purpose, "adjustmentValue": -1.375})
        occupancy = request.get("occupancyType") or "PRIMARY_RESIDENCE"
        if occupancy == "INVESTMENT":
            llpas.append({"adjustmentName": "Investment Property", "riskFactor": occupancy, "adjustmentValue": -2.125})
        elif occupancy == "SECOND_HOME":
            llpas.append({"adjustmentName": "Second Home", "riskFactor": occupancy, "adjustmentValue": -1.125})
        property_type = request.get("propertyType") or "SINGLE_FAMILY"
        if property_type == "CONDOMINIUM" and ltv > 75:
            llpas.append({"adjustmentName": "Condominium", "riskFactor": f"{property_type} / LTV>75%", "adjustmentValue": -0.750})
        elif property_type == "TWO_TO_FOUR_UNIT":
            llpas.append({"adjustmentName": "2-4 Unit Property", "riskFactor": property_type, "adjustmentValue": -1.000})
        if loan_amount > BASELINE_LIMITS["oneUnit"]:
            llpas.append({"adjustmentName": "High-Balance Loan", "riskFactor": "Above baseline limit", "adjustmentValue": -0.500})

        adjusted_price = round(base_price + sum(llpa["adjustmentValue"] for llpa in llpas), 3)
        srp_price = self._srp_price(loan_amount, note_rate, credit_score)

        messages = []
        if credit_score and credit_score < 620:
            messages.append("Minimum credit score of 620 is required.")
        if ltv > 97:
            messages.append("LTV exceeds the 97% maximum.")
        if loan_amount > HIGH_COST_LIMITS["oneUnit"]:
            messages.append("Loan amount exceeds the high-cost conforming limit.")

        return {
            "pricingDate": project_config.SYNTHETIC_AS_OF,
            "basePrice": base_price,
            "adjustedPrice": adjusted_price,
            "srpPrice": srp_price,
            "netPrice": round(adjusted_price + srp_price, 3),
            "llpaDetails": llpas,
            "eligibilityStatus": "Ineligible" if messages else "Eligible",
            "eligibilityMessages": messages,
        }

    def _srp_components(self, loan_amount: float, note_rate: float, credit_score: float) -> Dict[str, float]:
        """Additive SRP components, in points"""
        return {
            "base": SRP_BASE_PRICE,
            "rate": round((note_rate - 6.0) * 0.30, 3),
            "size": 0.25 if loan_amount >= 400000 else 0.10 if loan_amount >= 200000 else -0.15,
            "credit": 0.05 if credit_score >= 740 else -0.10 if credit_score and credit_score < 680 else 0.0,
        }

    def _srp_price(self, loan_amount: float, note_rate: float, credit_score: float) -> float:
        return round(sum(self._srp_components(loan_amount, note_rate, credit_score).values()), 3)

    def get_mission_score(self, request: Request) -> Response:
        state = _state(request, "propertyState", "state")
        county = request.get("propertyCounty") or "Metro"
        income = _number(request, "borrowerIncome", 75000)
        rng = _rng("mission", state, county, request.get("propertyZipCode"), request.get("loanAmount"), income)

        income_ratio = income / area_median_income(state, county)
        income_criteria = [name for name, met in [
            ("Income at or below 80% AMI", income_ratio <= 0.8),
            ("Income at or below 100% AMI", income_ratio <= 1.0),
            ("Income at or below 120% AMI", income_ratio <= 1.2),
        ] if met]
        location_met = rng.randint(0, 3)
        housing_met = rng.randint(0, 2)

        components = [
            self._component("Borrower Income", income_criteria, 3),
            self._component("Property Location", ["Minority census tract", "Low-income census tract",
                                                  "Disaster area", "Rural area"][:location_met], 4),
            self._component("Affordable Housing", ["Duty to Serve market", "Energy efficient home",
                                                   "Manufactured home"][:housing_met], 3),
        ]
        met_total = sum(component["criteriaMetCount"] for component in components)
        share = met_total / sum(component["totalCriteria"] for component in components) * 100
        score = 3 if share >= 60 else 2 if share >= 35 else 1 if share > 0 else 0

        incentives = []
        if score >= 2:
            incentives.append({"incentiveType": "LLPA Credit", "incentiveValue": "0.250", "description": "Loan-level price adjustment credit for mission loans"})
        if score == 3:
            incentives.append({"incentiveType": "Pricing Bonus", "incentiveValue": "0.125", "description": "Additional execution bonus for high-mission deliveries"})

        return {
            "missionScore": score,
            "missionCriteriaShare": round(share, 1),
            "missionDensityScore": round(sum(component["score"] for component in components) / len(components) / 10, 1),
            "componentScores": components,
            "eligibleForIncentives": bool(incentives),
            "incentiveDetails": incentives,
        }

    def _component(self, dimension: str, criteria: List[str], total: int) -> Dict[str, Any]:
        return {
            "dimension": dimension,
            "score": round(len(criteria) / total * 100),
            "criteriaMetCount": len(criteria),
            "totalCriteria": total,
            "criteriaMet": criteria,
        }

    def get_srp_pricing(self, request: Request) -> Response:
        loan_amount = _number(request, "loanAmount", 300000)
        note_rate = _number(request, "noteRate", 6.5)
        credit_score = _number(request, "creditScore", 740)

        price = self._srp_price(loan_amount, note_rate, credit_score)
        servicing_value = round(0.25 * 4.2 + (note_rate - 6.0) * 0.2, 3)
        as_of = _as_of()

        components = self._srp_components(loan_amount, note_rate, credit_score)
        breakdown = [
            {"component": "Base SRP", "value": components["base"], "description": "Base premium for servicing rights"},
            {"component": "Rate Adjustment", "value": components["rate"], "description": f"Note rate {note_rate:.3f}%"},
            {"component": "Loan Size Adjustment", "value": components["size"], "description": f"Loan amount ${loan_amount:,.0f}"},
            {"component": "Credit Adjustment", "value": components["credit"], "description": f"Credit score {credit_score:.0f}"},
        ]
        options = [
            {
                "commitmentPeriod": days,
                "price": round(price - step * 0.05, 3),
                "expirationDate": f"{(as_of + timedelta(days=days)).isoformat()}T17:00:00Z",
            }
            for step, days in enumerate([10, 30, 45, 60])
        ]
        return {
            "srpIndicativePrice": price,
            "srpPriceDate": project_config.SYNTHETIC_AS_OF,
            "servicingValue": servicing_value,
            "priceBreakdown": breakdown,
            "commitmentOptions": options,
        }

    # Servicing --------------------------------------------------------------

    def evaluate_mi_termination(self, request: Request) -> Response:
        ltv = _number(request, "ltv")
        current = (request.get("paymentHistory") or "CURRENT") == "CURRENT"

        if ltv <= MI_AUTOMATIC_THRESHOLD:
            termination, eligible = "AUTOMATIC", True
            message = f"LTV of {ltv:g}% is at or below {MI_AUTOMATIC_THRESHOLD}%; MI terminates automatically."
        elif ltv <= MI_BORROWER_REQUEST_THRESHOLD and current:
            termination, eligible = "BORROWER_REQUESTED", True
            message = f"LTV of {ltv:g}% allows the borrower to request MI cancellation."
        else:
            termination, eligible = "NONE", False
            message = f"LTV of {ltv:g}% is above the {MI_BORROWER_REQUEST_THRESHOLD}% cancellation threshold."

        return {
            "eligible": eligible,
            "terminationType": termination,
            "currentLtv": ltv,
            "originalLtv": _number(request, "originalLtv", 95),
            "automaticThreshold": MI_AUTOMATIC_THRESHOLD,
            "borrowerRequestThreshold": MI_BORROWER_REQUEST_THRESHOLD,
            "message": message,
        }

    def check_hilo_eligibility(self, request: Request) -> Response:
        ltv = _number(request, "ltv")
        loan_amount = _number(request, "loanAmount", 300000)
        occupancy = request.get("occupancyType") or "PRIMARY_RESIDENCE"
        minimum = HILO_MIN_LTV.get(occupancy, HILO_MIN_LTV["PRIMARY_RESIDENCE"])

        eligible = ltv > minimum
        benefit = max(50, int(round(loan_amount * 0.0004))) if eligible else 0
        message = (f"LTV of {ltv:g}% exceeds the {minimum}% minimum for a high-LTV refinance."
                   if eligible else
                   f"LTV of {ltv:g}% does not exceed the {minimum}% minimum; a standard refinance may apply.")
        return {
            "eligible": eligible,
            "currentLtv": ltv,
            "minimumLtv": minimum,
            "maxLtv": 97,
            "maxCltv": 105,
            "estimatedMonthlyBenefit": benefit,
            "message": message,
        }
