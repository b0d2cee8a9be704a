#!/usr/bin/env python3
"""
Servicing Handlers

Handlers for mortgage insurance termination and high-LTV refinance (HiLo)
eligibility. Both show the program overview until an LTV is supplied.
"""

from typing import Any, Dict

from query_processing import QueryType
from .base_handler import QueryHandler, money, table


class MiTerminationHandler(QueryHandler):
    """
    Handler for mortgage insurance cancellation, e.g., "Can I cancel PMI at 78% LTV?"
    """

    query_type = QueryType.MI_TERMINATION
    required_params = ("ltv",)
    field_map = {"loanAmount": "loanAmount", "ltv": "ltv", "state": "propertyState"}
    provider_method = "evaluate_mi_termination"
    example = "Can I cancel PMI at 78% LTV?"

    def clarification(self, params: Dict[str, Any]) -> str:
        return (
            "## MI (Mortgage Insurance) Termination\n\n"
            "I can evaluate whether a loan qualifies for MI termination.\n\n"
            "### Termination Types\n"
            + table(["Type", "LTV Threshold", "Process"], [
                ["Automatic", "≤78%", "Servicer must cancel"],
                ["Borrower Requested", "≤80%", "Borrower initiates"],
                ["Final", "Midpoint of term", "Automatic cancellation"],
            ])
            + "\n### Requirements\n"
            "- Current on mortgage payments\n"
            "- Good payment history (no 30+ day late in 12 months)\n"
            "- LTV at or below threshold\n"
            "- Property value supports LTV calculation\n\n"
            "*Provide loan details to check MI termination eligibility.*\n\n"
            f"*Example: \"{self.example}\"*"
        )

    def format_results(self, data: Dict[str, Any], params: Dict[str, Any]) -> str:
        content = "## MI Termination Evaluation\n\n"
        if data["eligible"]:
            content += "### ✅ Eligible for MI Termination\n\n"
        else:
            content += "### ℹ️ Not Yet Eligible for MI Termination\n\n"

        rows = [
            ["Current LTV", f"{data['currentLtv']:g}%"],
            ["Termination Type", data["terminationType"].replace("_", " ").title()],
        ]
        if "originalLtv" in data:
            rows.append(["Original LTV", f"{data['originalLtv']:g}%"])
        if "automaticThreshold" in data:
            rows.append(["Automatic Threshold", f"{data['automaticThreshold']}%"])
        if "borrowerRequestThreshold" in data:
            rows.append(["Borrower Request Threshold", f"{data['borrowerRequestThreshold']}%"])
        content += table(["Detail", "Value"], rows)
        content += f"\n*{data['message']}*"
        return content


class HiloEligibilityHandler(QueryHandler):
    """
    Handler for high-LTV refinance (RefiNow/HiLo) eligibility
    """

    query_type = QueryType.HILO_ELIGIBILITY
    required_params = ("ltv",)
    field_map = {"loanAmount": "loanAmount", "ltv": "ltv", "creditScore": "creditScore", "state": "propertyState"}
    provider_method = "check_hilo_eligibility"
    example = "Check HiLo eligibility for a loan at 98% LTV"

    def clarification(self, params: Dict[str, Any]) -> str:
        return (
            "## High LTV Refinance (RefiNow/HiLo) Eligibility\n\n"
            "The High LTV Refinance program helps underwater borrowers refinance.\n\n"
            "### Program Highlights\n"
            + table(["Feature", "Detail"], [
                ["Max LTV", "Up to 97%"],
                ["Max CLTV", "Up to 105%"],
                ["Appraisal", "Often waived"],
                ["Income Limit", "≤80% AMI"],
                ["Minimum Benefit", "$50/month payment reduction"],
            ])
            + "\n### Requirements\n"
            "- Loan must be owned by Fannie Mae\n"
            "- Current on payments (0x30 in 6 months, 1x30 in 12 months)\n"
            "- Original loan at least 12 months old\n"
            "- Must result in tangible benefit\n\n"
            "*Would you like to check a specific loan for HiLo eligibility?*\n\n"
            f"*Example: \"{self.example}\"*"
        )

    def format_results(self, data: Dict[str, Any], params: Dict[str, Any]) -> str:
        content = "## High LTV Refinance Eligibility\n\n"
        if data["eligible"]:
            content += "### ✅ Eligible for High LTV Refinance\n\n"
        else:
            content += "### ℹ️ Not Eligible for High LTV Refinance\n\n"

        rows = [["Current LTV", f"{data['currentLtv']:g}%"]]
        if "minimumLtv" in data:
            rows.append(["Minimum LTV", f"{data['minimumLtv']}%"])
        if "maxCltv" in data:
            rows.append(["Max CLTV", f"{data['maxCltv']}%"])
        if data.get("estimatedMonthlyBenefit"):
            rows.append(["Estimated Monthly Benefit", money(data["estimatedMonthlyBenefit"])])
        content += table(["Detail", "Value"], rows)
        content += f"\n*{data['message']}*"
        return content
