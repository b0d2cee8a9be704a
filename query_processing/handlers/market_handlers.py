#!/usr/bin/env python3
"""
Public Market Data Handlers

Handlers for the Exchange market-data categories: loan limits, housing
pulse, manufactured housing, opportunity zones, investor securities and
construction spending.
"""

from typing import Any, Dict

from query_processing import QueryType
from .base_handler import QueryHandler, count, money, table


class LoanLimitsHandler(QueryHandler):
    """
    Handler for conforming loan limit queries, e.g., "What are the loan limits in CA?"
    """

    query_type = QueryType.LOAN_LIMITS
    required_params = ("state",)
    field_map = {"state": "state", "county": "county"}
    provider_method = "get_loan_limits"
    example = "What are the loan limits in CA?"

    def clarification(self, params: Dict[str, Any]) -> str:
        return (
            "I'd be happy to help you look up conforming loan limits. Could you please specify which "
            "state you're interested in? For example, you can ask:\n\n"
            f"- \"{self.example}\"\n"
            "- \"Show me conforming loan limits for Los Angeles County, California\"\n"
            "- \"Loan limits in Texas\"\n\n"
            f"Example: \"{self.example}\""
        )

    def format_results(self, data: Dict[str, Any], params: Dict[str, Any]) -> str:
        county = data.get("county") or "All Counties"
        location = data["state"] + (f", {county} County" if county != "All Counties" else "")
        limits = data["limits"]

        content = f"## {data.get('year', 2025)} Conforming Loan Limits for {location}\n\n"
        content += table(["Property Units", "Limit"], [
            ["1-Unit", money(limits["oneUnit"])],
            ["2-Unit", money(limits["twoUnit"])],
            ["3-Unit", money(limits["threeUnit"])],
            ["4-Unit", money(limits["fourUnit"])],
        ])
        content += "\n"
        if data.get("highCostArea"):
            content += "🏠 **High-Cost Area** - Higher limits apply\n\n"
        content += f"*Source: {data['source']} | Effective: {data['effectiveDate']}*\n\n"
        content += "Would you like me to check eligibility for a specific loan amount, or look up limits for another area?"
        return content


class HousingPulseHandler(QueryHandler):
    """
    Handler for housing market queries; national figures when no state is given
    """

    query_type = QueryType.HOUSING_PULSE
    field_map = {"state": "state"}
    provider_method = "get_housing_pulse"
    example = "Housing market data for Texas"

    def format_results(self, data: Dict[str, Any], params: Dict[str, Any]) -> str:
        metrics = data["metrics"]
        trends = data["trends"]

        content = f"## Housing Market Pulse - {params.get('state') or 'National'}\n"
        content += f"*As of {data['dataDate']}*\n\n"
        content += "### Key Metrics\n\n"
        content += table(["Metric", "Value"], [
            ["Median Home Price", money(metrics["medianHomePrice"])],
            ["YoY Price Change", f"{metrics['homePriceYoY']:.1f}%"],
            ["Inventory (months)", f"{metrics['inventoryMonths']:.1f}"],
            ["Days on Market", metrics["daysOnMarket"]],
            ["30-Yr Mortgage Rate", f"{metrics['mortgageRate30Yr']:.2f}%"],
            ["15-Yr Mortgage Rate", f"{metrics['mortgageRate15Yr']:.2f}%"],
            ["Affordability Index", metrics["affordabilityIndex"]],
            ["New Listings", count(metrics["newListings"])],
            ["Pending Sales", count(metrics["pendingSales"])],
            ["Closed Sales", count(metrics["closedSales"])],
        ])
        content += "\n### Market Trends\n"
        content += f"- **Price Direction:** {trends['priceDirection']}\n"
        content += f"- **Inventory Direction:** {trends['inventoryDirection']}\n"
        content += f"- **Demand Level:** {trends['demandLevel']}\n"
        content += f"- **Market Temperature:** {trends['marketTemperature']}\n\n"
        content += f"*Source: {data['source']}*"
        return content


class ManufacturedHousingHandler(QueryHandler):
    """
    Handler for manufactured housing queries; national overview when no state is given
    """

    query_type = QueryType.MANUFACTURED_HOUSING
    field_map = {"state": "state"}
    provider_method = "get_manufactured_housing"
    example = "Manufactured housing in Florida"

    def format_results(self, data: Dict[str, Any], params: Dict[str, Any]) -> str:
        if params.get("state") and data.get("state"):
            content = f"## Manufactured Housing Data - {data['state']}\n\n"
            content += table(["Metric", "Value"], [
                ["Communities", count(data.get("communityCount"))],
                ["Total Units", count(data.get("unitCount"))],
                ["Avg Units/Community", data.get("avgUnitsPerCommunity", "N/A")],
            ])
            content += f"\n*Source: {data['source']}*"
            return content

        content = "## National Manufactured Housing Overview\n\n"
        totals = data.get("nationalTotals")
        if totals:
            content += "### National Totals\n"
            content += f"- **Total Communities:** {count(totals['totalCommunities'])}\n"
            content += f"- **Total Units:** {count(totals['totalUnits'])}\n"
            content += f"- **States Reporting:** {totals['statesReporting']}\n\n"
        breakdown = data.get("stateBreakdown")
        if breakdown:
            content += "### Top States by Community Count\n\n"
            content += table(["State", "Communities", "Units", "Avg/Community"], [
                [row["state"], count(row["communities"]), count(row["units"]), row["avgUnitsPerCommunity"]]
                for row in breakdown
            ])
        content += f"\n*Source: {data['source']}*"
        return content


class OpportunityZonesHandler(QueryHandler):
    """
    Handler for qualified opportunity zone queries
    """

    query_type = QueryType.OPPORTUNITY_ZONES
    field_map = {"state": "state", "county": "county"}
    provider_method = "get_opportunity_zones"
    example = "Opportunity zones in Nevada"

    def format_results(self, data: Dict[str, Any], params: Dict[str, Any]) -> str:
        state = params.get("state")
        content = f"## Opportunity Zones{f' - {state}' if state else ''}\n\n"
        content += f"Found **{count(data['totalZones'])}** qualified opportunity zones.\n\n"
        content += "### Zone Details\n\n"
        content += table(["Tract ID", "Designation", "Population", "Poverty Rate", "Median Income"], [
            [zone["tractId"], zone["designation"], count(zone["population"]),
             f"{zone['povertyRate']:.1f}%", money(zone["medianFamilyIncome"])]
            for zone in data["zones"]
        ])
        content += "\n### Investment Benefits\n"
        content += "Opportunity Zones offer tax incentives for investments including:\n"
        content += "- Capital gains tax deferral\n"
        content += "- Step-up in basis after 5-7 years\n"
        content += "- Tax-free gains on new investments held 10+ years\n"
        return content


class InvestorToolsHandler(QueryHandler):
    """
    Handler for MBS pool and security queries, e.g., "Show investor data for pool FN123456"
    """

    query_type = QueryType.INVESTOR_TOOLS
    field_map = {"poolNumber": "poolNumber", "cusip": "cusip"}
    provider_method = "get_investor_data"
    example = "Show investor data for pool FN123456"

    def format_results(self, data: Dict[str, Any], params: Dict[str, Any]) -> str:
        content = f"## Investor Data - {data['dataType'].replace('_', ' ').upper()}\n"
        content += f"*As of {data['asOfDate']}*\n\n"
        content += "### Security Records\n\n"
        content += table(["Pool #", "CUSIP", "Type", "Coupon", "WAC", "WAM", "Loan Count"], [
            [record["poolNumber"], record["cusip"], record["securityType"], f"{record['couponRate']:.2f}%",
             f"{record['wac']:.2f}%", record["wam"], record["loanCount"]]
            for record in data["records"]
        ])
        content += f"\n**Total Records:** {data['totalRecords']}"
        return content


class ConstructionSpendingHandler(QueryHandler):
    """
    Handler for construction spending queries, addressed by (section, sector, subsector)
    """

    query_type = QueryType.CONSTRUCTION_SPENDING
    field_map = {"section": "section", "sector": "sector", "subsector": "subsector"}
    provider_method = "get_construction_spending"
    example = "Private residential construction spending"

    def format_results(self, data: Dict[str, Any], params: Dict[str, Any]) -> str:
        content = f"## Construction Spending - {data['path']}\n"
        content += f"*{data['unit']}*\n\n"
        content += table(["Month", "Value ($M)"], [
            [point["period"], f"{point['value']:,.1f}"] for point in data["values"]
        ])
        change = data.get("monthOverMonthChange")
        if change is not None:
            content += f"\n**Month-over-Month Change:** {change:+.1f}%\n"
        content += f"\n*Source: {data['source']}*"
        return content
