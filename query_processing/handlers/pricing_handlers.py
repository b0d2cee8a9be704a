#!/usr/bin/env python3
"""
Pricing & Execution Handlers

Handlers for loan pricing with loan-level price adjustments, mission score
and servicing released premium (SRP) quotes.
"""

from typing import Any, Dict

from query_processing import QueryType
from .base_handler import QueryHandler, table


def points(value: float) -> str:
    return f"{value:.3f}"


class LoanPricingHandler(QueryHandler):
    """
    Handler for pricing queries, e.g., "Get pricing for $350,000 loan, 720 credit score, 85% LTV, purchase"
    """

    query_type = QueryType.LOAN_PRICING
    required_params = ("loanAmount", "creditScore")
    field_map = {
        "loanAmount": "loanAmount",
        "noteRate": "noteRate",
        "creditScore": "creditScore",
        "ltv": "ltv",
        "purpose": "loanPurpose",
        "propertyType": "propertyType",
        "occupancyType": "occupancyType",
        "state": "propertyState",
        "county": "propertyCounty",
    }
    provider_method = "get_loan_pricing"
    example = "Get pricing for $350,000 loan, 720 credit score, 85% LTV, purchase"

    def clarification(self, params: Dict[str, Any]) -> str:
        return (
            "## Loan Pricing Service\n\n"
            "I can calculate comprehensive loan pricing including LLPAs and SRPs. Please provide:\n\n"
            "### Required Information\n"
            "- **Loan Amount** (e.g., $400,000)\n"
            "- **Credit Score** (e.g., 740)\n"
            "- **LTV** (e.g., 80%)\n"
            "- **Loan Purpose** (Purchase, Rate/Term Refi, Cash-out)\n\n"
            "### Optional Parameters\n"
            "- Property Type, Occupancy, State\n"
            "- Note Rate\n\n"
            f"*Example: \"{self.example}\"*"
        )

    def build_request(self, params: Dict[str, Any]) -> Dict[str, Any]:
        request = super().build_request(params)
        request["cltv"] = request["ltv"]
        return request

    def format_results(self, data: Dict[str, Any], params: Dict[str, Any]) -> str:
        content = "## Loan Pricing Analysis\n"
        content += f"*Pricing Date: {data['pricingDate']}*\n\n"
        content += "### Price Summary\n"
        content += table(["Component", "Value"], [
            ["Base Price", points(data["basePrice"])],
            ["Adjusted Price", points(data["adjustedPrice"])],
            ["SRP Price", points(data["srpPrice"])],
            ["**Net Price**", f"**{points(data['netPrice'])}**"],
        ])

        content += "\n### LLPA Details\n"
        content += table(["Adjustment", "Factor", "Value"], [
            [llpa["adjustmentName"], llpa["riskFactor"], f"{llpa['adjustmentValue'] or 0.0:+.3f}"]
            for llpa in data["llpaDetails"]
        ])

        content += f"\n**Eligibility:** {data['eligibilityStatus']}\n"
        for message in data.get("eligibilityMessages") or []:
            content += f"- {message}\n"
        return content


class MissionScoreHandler(QueryHandler):
    """
    Handler for mission score (affordable lending) queries
    """

    query_type = QueryType.MISSION_SCORE
    required_params = ("state",)
    field_map = {
        "loanAmount": "loanAmount",
        "income": "borrowerIncome",
        "state": "propertyState",
        "county": "propertyCounty",
        "zipCode": "propertyZipCode",
    }
    provider_method = "get_mission_score"
    example = "Calculate mission score for a $300,000 loan with $60,000 income in TX"

    def clarification(self, params: Dict[str, Any]) -> str:
        return (
            "## Mission Score Calculator\n\n"
            "Mission Score evaluates loans for affordable and sustainable lending goals.\n\n"
            "### Score Levels\n"
            + table(["Score", "Description", "Incentives"], [
                ["3", "High Mission", "Maximum LLPA credits"],
                ["2", "Moderate Mission", "Standard incentives"],
                ["1", "Low Mission", "Minimal incentives"],
                ["0", "Not Mission", "No incentives"],
            ])
            + "\n### Criteria Evaluated\n"
            "- First-time homebuyer status\n"
            "- Income relative to AMI\n"
            "- Property location (underserved areas)\n"
            "- Affordable housing initiatives\n\n"
            "*Provide loan details including state, income, and property info for scoring.*\n\n"
            f"*Example: \"{self.example}\"*"
        )

    def format_results(self, data: Dict[str, Any], params: Dict[str, Any]) -> str:
        score = data["missionScore"]
        content = "## Mission Score Results\n\n"
        content += f"### Overall Score: {score}/3{' 🌟' if score >= 2 else ''}\n\n"
        content += table(["Metric", "Value"], [
            ["Mission Criteria Share", f"{data['missionCriteriaShare']:.1f}%"],
            ["Mission Density Score", f"{data['missionDensityScore']:.1f}"],
        ])

        content += "\n### Component Scores\n"
        for component in data["componentScores"]:
            content += f"**{component['dimension']}**: {component['score']:.0f}/100\n"
            content += f"- Criteria Met: {component['criteriaMetCount']}/{component['totalCriteria']}\n"
            for criterion in component.get("criteriaMet") or []:
                content += f"  - {criterion}\n"
            content += "\n"

        if data["eligibleForIncentives"]:
            content += "### ✅ Eligible for Incentives\n"
            for incentive in data.get("incentiveDetails") or []:
                content += f"- **{incentive['incentiveType']}**: {incentive['incentiveValue']} - {incentive['description']}\n"
        return content


class SrpPricingHandler(QueryHandler):
    """
    Handler for servicing released premium quotes; every input has a default
    """

    query_type = QueryType.SRP_PRICING
    field_map = {"loanAmount": "loanAmount", "noteRate": "noteRate", "ltv": "ltv", "creditScore": "creditScore"}
    provider_method = "get_srp_pricing"
    example = "Get SRP pricing for a $400,000 loan at 6.75% rate"

    def format_results(self, data: Dict[str, Any], params: Dict[str, Any]) -> str:
        content = "## SRP (Servicing Released Premium) Pricing\n\n"
        content += "SRP pricing determines the premium paid for selling servicing rights.\n\n"
        content += "### SRP Quote\n"
        content += table(["Component", "Value"], [
            ["Indicative SRP Price", points(data["srpIndicativePrice"])],
            ["Price Date", data["srpPriceDate"]],
            ["Servicing Value", points(data["servicingValue"])],
        ])

        content += "\n### Price Breakdown\n"
        for component in data["priceBreakdown"]:
            content += f"- **{component['component']}**: {points(component['value'])} - {component['description']}\n"

        content += "\n### Commitment Options\n"
        content += table(["Period (Days)", "Price", "Expiration"], [
            [option["commitmentPeriod"], points(option["price"]), option["expirationDate"].split("T")[0]]
            for option in data["commitmentOptions"]
        ])
        return content
