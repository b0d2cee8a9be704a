#!/usr/bin/env python3
"""
Originating & Underwriting Handlers

Handlers for loan lookup, AMI / HomeReady eligibility, Uniform Property
Dataset submission, appraisal (Collateral Underwriter) findings and Desktop
Underwriter messages.
"""

from typing import Any, Dict

from query_processing import QueryType
from .base_handler import QueryHandler, money, table


class LoanLookupHandler(QueryHandler):
    """
    Handler for loan ownership lookups, e.g., "Is this loan owned by Fannie Mae?"
    """

    query_type = QueryType.LOAN_LOOKUP
    required_params = ("borrowerLastName", "state")
    field_map = {
        "borrowerLastName": "borrowerLastName",
        "propertyAddress": "propertyStreetAddress",
        "city": "propertyCity",
        "state": "propertyState",
        "zipCode": "propertyZipCode",
    }
    provider_method = "loan_lookup"
    example = "Look up loan for borrower Smith at 123 Main St, Austin TX 78701"

    def clarification(self, params: Dict[str, Any]) -> str:
        return (
            "## Loan Lookup Service\n\n"
            "I can help you determine if a loan is owned by Fannie Mae. To perform a lookup, I'll need:\n\n"
            "1. **Borrower's Last Name**\n"
            "2. **Property Address** (street, city, state, zip)\n"
            "3. **Last 4 digits of SSN** (optional, for more accurate results)\n\n"
            "This service helps verify loan ownership for various purposes including:\n"
            "- Refinance eligibility\n"
            "- Modification programs\n"
            "- Servicing transfers\n\n"
            "Please provide the borrower details to proceed.\n\n"
            f"*Example: \"{self.example}\"*"
        )

    def format_results(self, data: Dict[str, Any], params: Dict[str, Any]) -> str:
        content = "## Loan Lookup Results\n\n"
        if data["ownedByFannieMae"]:
            content += "### ✅ Loan Found in Fannie Mae Portfolio\n\n"
            note_rate = data.get("noteRate")
            content += table(["Detail", "Value"], [
                ["Fannie Mae Loan #", data.get("fannieMaeLoanNumber", "")],
                ["Servicer", data.get("servicerName", "")],
                ["Current UPB", money(data.get("currentUPB"))],
                ["Note Rate", f"{note_rate:.3f}%" if note_rate is not None else "N/A"],
                ["Eligible for Refi", "Yes" if data.get("eligibleForRefi") else "No"],
                ["Appraisal Waiver", "May qualify" if data.get("eligibleForAppraisalWaiver") else "Not eligible"],
            ])
            content += "\n"
        else:
            content += "### ℹ️ Loan Not Found\n\n"
            content += "This loan does not appear to be owned by Fannie Mae.\n\n"
            content += "The loan may be:\n"
            content += "- Owned by Freddie Mac\n"
            content += "- A portfolio loan\n"
            content += "- A government loan (FHA/VA/USDA)\n\n"
        content += f"*{data['message']}*"
        return content


class AmiHomeReadyHandler(QueryHandler):
    """
    Handler for HomeReady eligibility based on Area Median Income
    """

    query_type = QueryType.AMI_HOMEREADY
    required_params = ("income", "state")
    field_map = {"state": "propertyState", "county": "propertyCounty", "income": "borrowerIncome"}
    provider_method = "ami_lookup"
    example = "Is $75,000 income eligible for HomeReady in Los Angeles County, CA?"

    def clarification(self, params: Dict[str, Any]) -> str:
        return (
            "I can help you check HomeReady eligibility based on Area Median Income (AMI). Please provide:\n\n"
            "1. **Annual Income** - The borrower's total household income\n"
            "2. **State** - Two-letter state code (e.g., CA, TX)\n"
            "3. **County** (optional) - For more accurate results\n\n"
            f"Example: \"{self.example}\""
        )

    def format_results(self, data: Dict[str, Any], params: Dict[str, Any]) -> str:
        content = "## HomeReady / AMI Eligibility Analysis\n\n"
        content += table(["Parameter", "Value"], [
            ["Location", f"{params.get('county') or 'Metro'}, {params['state']}"],
            ["Area Median Income (AMI)", money(data["areaMedianIncome"])],
            ["Borrower Income", money(params["income"])],
            ["% of AMI", f"{data['amiPercentage']}%"],
            ["80% AMI Limit", money(data["incomeLimit80AMI"])],
        ])
        content += "\n"

        if data["homeReadyEligible"]:
            content += "### ✅ HomeReady Eligible!\n\n"
            content += "Great news! The borrower qualifies for Fannie Mae's HomeReady program, which offers:\n"
            content += "- Down payments as low as 3%\n"
            content += "- Reduced MI coverage requirements\n"
            content += "- Flexible income sources (boarder income, rental income)\n\n"
        else:
            content += "### ℹ️ Not HomeReady Eligible\n\n"
            content += "The borrower's income exceeds 80% of AMI for this area.\n\n"

        content += "**Eligible Programs:**\n"
        for program in data["eligiblePrograms"]:
            # Upstream sometimes sends bare program names
            if isinstance(program, dict):
                content += f"- {program['programName']}{' ✓' if program.get('eligible') else ''}\n"
            else:
                content += f"- {program}\n"
        return content


class PropertyDataHandler(QueryHandler):
    """
    Handler for Uniform Property Dataset (UPD) submissions
    """

    query_type = QueryType.PROPERTY_DATA
    required_params = ("propertyAddress",)
    field_map = {
        "propertyAddress": "propertyStreetAddress",
        "city": "propertyCity",
        "state": "propertyState",
        "zipCode": "propertyZipCode",
        "propertyType": "propertyType",
    }
    provider_method = "submit_property_data"
    example = "Submit property data for 123 Main St, Austin TX 78701"

    def clarification(self, params: Dict[str, Any]) -> str:
        return (
            "## Property Data (UPD) Submission\n\n"
            "The Uniform Property Dataset (UPD) service allows lenders to submit property data for:\n\n"
            "- **Property Valuation** - Get automated property values\n"
            "- **Appraisal Data** - Submit appraisal information\n"
            "- **Collateral Analysis** - Property risk assessment\n\n"
            "### Required Information\n"
            "- Property Address (street, city, state, zip)\n"
            "- Property Type (SFR, Condo, PUD, etc.)\n"
            "- Legal Description\n"
            "- Sale/Contract Price (if applicable)\n\n"
            "Would you like to submit property data for valuation?\n\n"
            f"*Example: \"{self.example}\"*"
        )

    def format_results(self, data: Dict[str, Any], params: Dict[str, Any]) -> str:
        location = ", ".join(part for part in (params["propertyAddress"], params.get("city"), params.get("state")) if part)
        rows = [
            ["Submission ID", data["submissionId"]],
            ["Status", data["status"]],
            ["Property", location],
            ["Property Type", data.get("propertyType", "SINGLE_FAMILY").replace("_", " ").title()],
            ["Estimated Value", money(data["estimatedValue"])],
        ]
        if "valueRangeLow" in data and "valueRangeHigh" in data:
            rows.append(["Value Range", f"{money(data['valueRangeLow'])} - {money(data['valueRangeHigh'])}"])
        if "confidenceScore" in data:
            rows.append(["Confidence Score", f"{data['confidenceScore']}/100"])

        content = "## Property Data (UPD) Submission Results\n\n"
        content += table(["Detail", "Value"], rows)
        return content


class AppraisalFindingsHandler(QueryHandler):
    """
    Handler for Collateral Underwriter appraisal findings
    """

    query_type = QueryType.APPRAISAL_FINDINGS
    required_params = ("documentFileId",)
    field_map = {"documentFileId": "documentFileId"}
    provider_method = "get_appraisal_findings"
    example = "Get appraisal findings for document file ID 1234567890"

    def clarification(self, params: Dict[str, Any]) -> str:
        return (
            "## Appraisal Findings & CU Score\n\n"
            "The Collateral Underwriter (CU) provides automated appraisal risk assessment.\n\n"
            "### CU Risk Score Scale\n"
            + table(["Score", "Risk Level", "Typical Action"], [
                ["1.0-2.5", "Low", "Minimal review needed"],
                ["2.5-3.5", "Medium", "Standard review"],
                ["3.5-5.0", "High", "Enhanced review required"],
            ])
            + "\n### What CU Evaluates\n"
            "- Value consistency with market data\n"
            "- Comparable selection quality\n"
            "- Adjustment reasonableness\n"
            "- Market condition accuracy\n\n"
            "To get appraisal findings, I'll need a **Document File ID** from your submission.\n\n"
            f"*Example: \"{self.example}\"*"
        )

    def format_results(self, data: Dict[str, Any], params: Dict[str, Any]) -> str:
        content = f"## Appraisal Findings - Document File {data['documentFileId']}\n\n"
        content += table(["Metric", "Value"], [
            ["CU Risk Score", f"{data['cuRiskScore']:.1f} / 5.0"],
            ["Risk Level", data["riskLevel"]],
            ["Appraisal Waiver", "May qualify" if data.get("appraisalWaiverEligible") else "Not eligible"],
        ])
        content += "\n"
        if data["flags"]:
            content += "### ⚠️ Risk Flags\n"
            for flag in data["flags"]:
                content += f"- **{flag['code']}**: {flag['description']}\n"
        else:
            content += "### ✅ No Risk Flags\n"
            content += "CU found no appraisal risk flags for this submission.\n"
        return content


class DuMessagesHandler(QueryHandler):
    """
    Handler for Desktop Underwriter recommendations and messages
    """

    query_type = QueryType.DU_MESSAGES
    required_params = ("casefileId",)
    field_map = {"casefileId": "casefileId"}
    provider_method = "get_du_messages"
    example = "Get DU messages for casefile 1234567890"

    def clarification(self, params: Dict[str, Any]) -> str:
        return (
            "## Desktop Underwriter (DU) Messages\n\n"
            "DU provides automated underwriting recommendations and findings.\n\n"
            "### DU Recommendations\n"
            + table(["Recommendation", "Description"], [
                ["Approve/Eligible", "Meets GSE standards"],
                ["Approve/Ineligible", "Meets credit standards but has eligibility issue"],
                ["Refer/Eligible", "Needs manual underwriting"],
                ["Refer with Caution", "Higher risk, manual review required"],
                ["Out of Scope", "Cannot be processed by DU"],
            ])
            + "\nTo retrieve DU messages, I'll need a **Casefile ID** from your DU submission.\n\n"
            f"*Example: \"{self.example}\"*"
        )

    def format_results(self, data: Dict[str, Any], params: Dict[str, Any]) -> str:
        content = f"## DU Findings - Casefile {data['casefileId']}\n\n"
        content += f"**Recommendation:** {data['recommendation']}\n\n"
        if data["messages"]:
            content += "### Messages\n"
            content += table(["Category", "Message"], [
                [message.get("category", ""), message.get("messageText", "")] for message in data["messages"]
            ])
        return content
