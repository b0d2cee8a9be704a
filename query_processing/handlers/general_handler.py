#!/usr/bin/env python3
"""
General Query Handler

Returns the static capability menu for greetings, help requests and
anything the classifier could not place.
"""

from typing import Any, Dict

from query_processing import QueryType
from .base_handler import DispatchResult, QueryHandler, table

MENU_SECTIONS = [
    ("📊 Public Market Data", [
        ["**Loan Limits**", "Conforming limits by location", '"Loan limits in California"'],
        ["**Housing Pulse**", "Market metrics & trends", '"Housing market data for Texas"'],
        ["**Manufactured Housing**", "MH community statistics", '"Manufactured housing in Florida"'],
        ["**Opportunity Zones**", "Tax incentive zones", '"Opportunity zones in Nevada"'],
        ["**Investor Tools**", "MBS/Security data", '"Show investor data for pool FN123456"'],
        ["**Construction Spending**", "Monthly construction put in place", '"Private residential construction spending"'],
    ]),
    ("🏠 Originating & Underwriting", [
        ["**Loan Lookup**", "Check Fannie Mae ownership", '"Is this loan owned by Fannie Mae?"'],
        ["**AMI/HomeReady**", "Income eligibility", '"Is $70k income HomeReady eligible in TX?"'],
        ["**Property Data**", "UPD submission", '"Submit property data"'],
        ["**Appraisal/CU**", "Collateral analysis", '"Get appraisal findings"'],
        ["**DU Messages**", "Underwriting findings", '"Get DU messages"'],
    ]),
    ("💰 Pricing & Execution", [
        ["**Loan Pricing**", "LLPAs & pricing", '"Get pricing for $400k loan, 740 score"'],
        ["**Mission Score**", "Affordable lending score", '"Calculate mission score"'],
        ["**SRP Pricing**", "Servicing premiums", '"Get SRP pricing"'],
    ]),
    ("🔧 Servicing", [
        ["**MI Termination**", "Cancel mortgage insurance", '"Check MI termination eligibility"'],
        ["**HiLo/RefiNow**", "High LTV refi eligibility", '"Check HiLo eligibility"'],
    ]),
]


def build_menu() -> str:
    content = "# Welcome to RTLMAC - Real-Time Lending Machine AI Companion\n\n"
    content += ("I'm your assistant for accessing the Fannie Mae API ecosystem. "
                "Here's everything I can help you with:\n\n")
    for title, rows in MENU_SECTIONS:
        content += f"## {title}\n\n"
        content += table(["API", "Description", "Example"], rows)
        content += "\n"
    content += "---\n\n"
    content += ("**Just ask in natural language!** I'll route your request to the appropriate API "
                "and format the results for you.")
    return content


CAPABILITY_MENU = build_menu()


class GeneralQueryHandler(QueryHandler):
    """
    Handler for the help / fallback state; never calls the data provider
    """

    query_type = QueryType.GENERAL

    def handle(self, params: Dict[str, Any], provider) -> DispatchResult:
        return DispatchResult(CAPABILITY_MENU, None, self.query_type)

    def format_results(self, data: Dict[str, Any], params: Dict[str, Any]) -> str:
        return CAPABILITY_MENU
