"""Tests for handler dispatch, request building and Markdown rendering"""

from unittest import mock

import pytest

from data_provider import SyntheticDataProvider
from query_processing import QueryType, dispatch, process_query
from query_processing.handlers import (
    CAPABILITY_MENU,
    AmiHomeReadyHandler,
    LoanLimitsHandler,
    LoanPricingHandler,
    SrpPricingHandler,
)
from query_processing.processor import HANDLERS

# Parameters that satisfy each category's requirements
RESOLVED_PARAMS = {
    QueryType.LOAN_LIMITS: {"state": "CA", "county": "", "zipCode": ""},
    QueryType.HOUSING_PULSE: {"state": "TX", "county": "", "zipCode": ""},
    QueryType.MANUFACTURED_HOUSING: {"state": "FL", "county": "", "zipCode": ""},
    QueryType.OPPORTUNITY_ZONES: {"state": "NV", "county": "", "zipCode": ""},
    QueryType.INVESTOR_TOOLS: {"poolNumber": "FN123456", "cusip": ""},
    QueryType.CONSTRUCTION_SPENDING: {"section": "Private", "sector": "Residential", "subsector": ""},
    QueryType.LOAN_LOOKUP: {"borrowerLastName": "Smith", "propertyAddress": "123 Main St", "city": "Austin",
                            "state": "TX", "zipCode": "78701"},
    QueryType.AMI_HOMEREADY: {"income": 75000, "state": "CA", "county": "Los Angeles"},
    QueryType.PROPERTY_DATA: {"propertyAddress": "123 Main St", "city": "Austin", "state": "TX",
                              "zipCode": "78701", "propertyType": ""},
    QueryType.APPRAISAL_FINDINGS: {"documentFileId": "1234567890"},
    QueryType.DU_MESSAGES: {"casefileId": "1234567890"},
    QueryType.LOAN_PRICING: {"loanAmount": 350000, "noteRate": 0, "ltv": 85, "creditScore": 720, "state": "",
                             "county": "", "purpose": "PURCHASE", "propertyType": "", "occupancyType": ""},
    QueryType.MISSION_SCORE: {"loanAmount": 300000, "income": 60000, "state": "TX", "county": "", "zipCode": ""},
    QueryType.SRP_PRICING: {"loanAmount": 0, "noteRate": 0, "ltv": 0, "creditScore": 0},
    QueryType.MI_TERMINATION: {"loanAmount": 0, "ltv": 78, "state": ""},
    QueryType.HILO_ELIGIBILITY: {"loanAmount": 0, "ltv": 98, "creditScore": 0, "state": ""},
}

# Categories that ask for more input when their identifiers are missing
INCOMPLETE_PARAMS = {
    QueryType.LOAN_LIMITS: {"state": "", "county": "", "zipCode": ""},
    QueryType.LOAN_LOOKUP: {"borrowerLastName": "", "propertyAddress": "", "city": "", "state": "", "zipCode": ""},
    QueryType.AMI_HOMEREADY: {"income": 0, "state": "", "county": ""},
    QueryType.PROPERTY_DATA: {"propertyAddress": "", "city": "", "state": "", "zipCode": "", "propertyType": ""},
    QueryType.APPRAISAL_FINDINGS: {"documentFileId": ""},
    QueryType.DU_MESSAGES: {"casefileId": ""},
    QueryType.LOAN_PRICING: {"loanAmount": 0, "noteRate": 0, "ltv": 0, "creditScore": 0, "state": "",
                             "county": "", "purpose": "", "propertyType": "", "occupancyType": ""},
    QueryType.MISSION_SCORE: {"loanAmount": 0, "income": 0, "state": "", "county": "", "zipCode": ""},
    QueryType.MI_TERMINATION: {"loanAmount": 0, "ltv": 0, "state": ""},
    QueryType.HILO_ELIGIBILITY: {"loanAmount": 0, "ltv": 0, "creditScore": 0, "state": ""},
}


def llpa_table_rows(content):
    section = content.split("### LLPA Details", 1)[1].split("**Eligibility:**", 1)[0]
    rows = [line for line in section.splitlines() if line.startswith("| ")]
    return rows[1:]  # drop the header


def test_every_query_type_has_a_handler():
    assert set(HANDLERS) == set(QueryType)


@pytest.mark.parametrize("query_type", list(RESOLVED_PARAMS))
def test_resolved_query_makes_exactly_one_provider_call(query_type):
    provider = mock.MagicMock(wraps=SyntheticDataProvider())
    result = dispatch(query_type, RESOLVED_PARAMS[query_type], provider)

    assert result.query_type == query_type
    assert result.data is not None
    assert result.content.startswith("## ")
    assert len(provider.method_calls) == 1
    assert provider.method_calls[0][0] == HANDLERS[query_type].provider_method


@pytest.mark.parametrize("query_type", list(INCOMPLETE_PARAMS))
def test_incomplete_query_asks_for_more_without_calling_provider(query_type):
    provider = mock.Mock()
    result = dispatch(query_type, INCOMPLETE_PARAMS[query_type], provider)

    assert result.query_type == query_type
    assert result.data is None
    assert "Example" in result.content
    assert provider.method_calls == []


def test_loan_limits_for_california(synthetic_provider):
    result = dispatch(QueryType.LOAN_LIMITS, {"state": "CA", "county": "", "zipCode": ""}, synthetic_provider)

    assert "Conforming Loan Limits for CA" in result.content
    for units in ("1-Unit", "2-Unit", "3-Unit", "4-Unit"):
        assert f"| {units} | $" in result.content
    assert "| 1-Unit | $806,500 |" in result.content
    assert "*Source: " in result.content
    assert "Effective: 2025-01-01" in result.content


def test_loan_limits_high_cost_county(synthetic_provider):
    result = dispatch(QueryType.LOAN_LIMITS, {"state": "CA", "county": "Los Angeles", "zipCode": ""}, synthetic_provider)

    assert result.data["highCostArea"] is True
    assert "CA, Los Angeles County" in result.content
    assert "| 1-Unit | $1,209,750 |" in result.content
    assert "High-Cost Area" in result.content


def test_loan_limits_clarification_has_example():
    result = dispatch(QueryType.LOAN_LIMITS, {"state": "", "county": "", "zipCode": ""}, mock.Mock())
    assert 'Example: "What are the loan limits in CA?"' in result.content


@pytest.mark.parametrize("income, eligible", [(50000, True), (200000, False)])
def test_homeready_banner_follows_eligibility(synthetic_provider, income, eligible):
    result = dispatch(QueryType.AMI_HOMEREADY, {"income": income, "state": "CA", "county": ""}, synthetic_provider)

    assert result.data["homeReadyEligible"] is eligible
    assert ("### ✅ HomeReady Eligible!" in result.content) is eligible
    assert ("### ℹ️ Not HomeReady Eligible" in result.content) is not eligible


def test_homeready_banner_uses_provider_flag_and_plain_program_names():
    provider = mock.Mock()
    provider.ami_lookup.return_value = {
        "areaMedianIncome": 100000,
        "amiPercentage": 79,
        "incomeLimit80AMI": 80000,
        "homeReadyEligible": True,
        "eligiblePrograms": ["HomeReady", "Standard Conforming"],
    }
    result = dispatch(QueryType.AMI_HOMEREADY, {"income": 79000, "state": "TX", "county": ""}, provider)

    assert "### ✅ HomeReady Eligible!" in result.content
    assert "- HomeReady\n" in result.content
    assert "| % of AMI | 79% |" in result.content
    provider.ami_lookup.assert_called_once()


def test_homeready_missing_income_or_state():
    provider = mock.Mock()
    for params in ({"income": 0, "state": "CA", "county": ""}, {"income": 75000, "state": "", "county": ""}):
        result = dispatch(QueryType.AMI_HOMEREADY, params, provider)
        assert result.data is None
        assert 'Example: "Is $75,000 income eligible for HomeReady in Los Angeles County, CA?"' in result.content
    provider.ami_lookup.assert_not_called()


def test_pricing_renders_net_price_and_every_llpa(synthetic_provider):
    params = dict(RESOLVED_PARAMS[QueryType.LOAN_PRICING], occupancyType="INVESTMENT", propertyType="CONDOMINIUM")
    result = dispatch(QueryType.LOAN_PRICING, params, synthetic_provider)

    assert f"| **Net Price** | **{result.data['netPrice']:.3f}** |" in result.content
    assert len(result.data["llpaDetails"]) == 3
    assert len(llpa_table_rows(result.content)) == len(result.data["llpaDetails"])
    assert "**Eligibility:** Eligible" in result.content


def test_pricing_request_applies_defaults_and_mirrors_ltv():
    handler = LoanPricingHandler()
    request = handler.build_request(RESOLVED_PARAMS[QueryType.LOAN_PRICING])

    assert list(request)[0] == "referenceIdentifier"
    assert request["referenceIdentifier"].startswith("pricing-")
    assert request["loanAmount"] == 350000
    assert request["creditScore"] == 720
    assert request["noteRate"] == 6.5
    assert request["ltv"] == 85
    assert request["cltv"] == 85
    assert request["loanPurpose"] == "PURCHASE"
    assert request["occupancyType"] == "PRIMARY_RESIDENCE"


def test_empty_values_never_override_defaults():
    request = SrpPricingHandler().build_request(RESOLVED_PARAMS[QueryType.SRP_PRICING])
    assert request["loanAmount"] == 300000
    assert request["creditScore"] == 740
    assert request["referenceIdentifier"].startswith("srp-")


def test_public_categories_have_no_reference_identifier():
    request = LoanLimitsHandler().build_request({"state": "CA", "county": "Cook", "zipCode": ""})
    assert request == {"state": "CA", "county": "Cook"}


def test_ami_request_maps_fields():
    request = AmiHomeReadyHandler().build_request({"income": 75000, "state": "CA", "county": ""})
    assert request["borrowerIncome"] == 75000
    assert request["propertyState"] == "CA"
    assert request["propertyCounty"] == "Metro"
    assert request["referenceIdentifier"].startswith("ami-")


def test_menu_is_stable_and_never_calls_provider():
    provider = mock.Mock()
    first = dispatch(QueryType.GENERAL, {}, provider)
    second = dispatch(QueryType.GENERAL, {}, provider)

    assert first.content == second.content == CAPABILITY_MENU
    assert first.data is None
    assert first.content.startswith("# Welcome to RTLMAC")
    assert provider.method_calls == []


def test_unknown_category_string_gets_menu():
    result = dispatch("something_else", {"state": "CA"}, mock.Mock())
    assert result.query_type == QueryType.GENERAL
    assert result.content == CAPABILITY_MENU


def test_category_string_is_resolved():
    result = dispatch("loan_limits", {"state": "TX", "county": "", "zipCode": ""}, SyntheticDataProvider())
    assert result.query_type == QueryType.LOAN_LIMITS
    assert result.data["state"] == "TX"


@pytest.mark.parametrize("query, expected_type, resolved", [
    ("What are the loan limits in CA?", QueryType.LOAN_LIMITS, True),
    ("Is $75,000 income eligible for HomeReady in Los Angeles County, CA?", QueryType.AMI_HOMEREADY, True),
    ("Show investor data for pool FN123456", QueryType.INVESTOR_TOOLS, True),
    ("Get pricing for $350,000 loan, 720 credit score, 85% LTV, purchase", QueryType.LOAN_PRICING, True),
    ("Get DU messages", QueryType.DU_MESSAGES, False),
    ("Check MI termination eligibility", QueryType.MI_TERMINATION, False),
    ("hello", QueryType.GENERAL, False),
])
def test_process_query_end_to_end(synthetic_provider, query, expected_type, resolved):
    result = process_query(query, synthetic_provider)
    assert result.query_type == expected_type
    assert (result.data is not None) is resolved


def test_zero_llpa_renders_without_negative_sign(synthetic_provider):
    params = dict(RESOLVED_PARAMS[QueryType.LOAN_PRICING], creditScore=790, ltv=55)
    result = dispatch(QueryType.LOAN_PRICING, params, synthetic_provider)

    assert "| Credit Score / LTV | ≥780 / ≤60% | +0.000 |" in result.content
    assert "-0.000" not in result.content


def test_negative_zero_from_provider_is_normalised():
    provider = mock.Mock()
    provider.get_loan_pricing.return_value = {
        "pricingDate": "2025-01-15",
        "basePrice": 100.0,
        "adjustedPrice": 100.0,
        "srpPrice": 1.1,
        "netPrice": 101.1,
        "llpaDetails": [{"adjustmentName": "Credit Score / LTV", "riskFactor": "≥780 / ≤60%", "adjustmentValue": -0.0}],
        "eligibilityStatus": "Eligible",
    }
    result = dispatch(QueryType.LOAN_PRICING, RESOLVED_PARAMS[QueryType.LOAN_PRICING], provider)

    assert "| Credit Score / LTV | ≥780 / ≤60% | +0.000 |" in result.content
