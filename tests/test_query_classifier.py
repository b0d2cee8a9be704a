"""Tests for query classification and per-category parameter extraction"""

import pytest

from query_processing import QueryType

STATE_CODES = ["CA", "TX", "NY", "FL", "WA", "IL", "AZ", "NV", "OR", "IN", "ME", "MI", "OK", "PA", "HI", "DE"]

PARAM_KEYS = {
    QueryType.LOAN_LIMITS: {"state", "county", "zipCode"},
    QueryType.HOUSING_PULSE: {"state", "county", "zipCode"},
    QueryType.MANUFACTURED_HOUSING: {"state", "county", "zipCode"},
    QueryType.OPPORTUNITY_ZONES: {"state", "county", "zipCode"},
    QueryType.AMI_HOMEREADY: {"income", "state", "county"},
    QueryType.LOAN_PRICING: {"loanAmount", "noteRate", "ltv", "creditScore", "state", "county",
                             "purpose", "propertyType", "occupancyType"},
    QueryType.SRP_PRICING: {"loanAmount", "noteRate", "ltv", "creditScore"},
    QueryType.MISSION_SCORE: {"loanAmount", "income", "state", "county", "zipCode"},
    QueryType.INVESTOR_TOOLS: {"poolNumber", "cusip"},
    QueryType.LOAN_LOOKUP: {"borrowerLastName", "propertyAddress", "city", "state", "zipCode"},
    QueryType.PROPERTY_DATA: {"propertyAddress", "city", "state", "zipCode", "propertyType"},
    QueryType.APPRAISAL_FINDINGS: {"documentFileId"},
    QueryType.DU_MESSAGES: {"casefileId"},
    QueryType.MI_TERMINATION: {"loanAmount", "ltv", "state"},
    QueryType.HILO_ELIGIBILITY: {"loanAmount", "ltv", "creditScore", "state"},
    QueryType.CONSTRUCTION_SPENDING: {"section", "sector", "subsector"},
}


@pytest.mark.parametrize("state", STATE_CODES)
@pytest.mark.parametrize("template", [
    "What are the loan limits in {state}?",
    "loan limit for {state}",
    "Show me the LOAN LIMITS in {state} please",
    "{state} conforming loan limit",
])
def test_loan_limit_queries_capture_state(classifier, template, state):
    query_type, params = classifier.classify(template.format(state=state))
    assert query_type == QueryType.LOAN_LIMITS
    assert params["state"] == state


@pytest.mark.parametrize("query, state", [
    ("What is the loan limit in CA?", "CA"),
    ("What is my loan limit in TX?", "TX"),
    ("WHAT ARE THE LOAN LIMITS IN CA?", "CA"),
    ("loan limits in ky", "KY"),
])
def test_natural_loan_limit_questions_resolve_state(classifier, query, state):
    query_type, params = classifier.classify(query)
    assert query_type == QueryType.LOAN_LIMITS
    assert params["state"] == state


def test_lowercase_state_token_is_uppercased(classifier):
    query_type, params = classifier.classify("what are the loan limits in tx")
    assert query_type == QueryType.LOAN_LIMITS
    assert params["state"] == "TX"


@pytest.mark.parametrize("query", ["hello", "thanks!", "What can you do?", "good morning", ""])
def test_unmatched_queries_fall_back_to_general(classifier, query):
    assert classifier.classify(query) == (QueryType.GENERAL, {})


@pytest.mark.parametrize("query", [
    "What are the loan limits in CA?",
    "Get pricing for $350,000 loan, 720 credit score, 85% LTV, purchase",
    "Private residential construction spending",
    "hello",
])
def test_classification_is_deterministic(classifier, query):
    assert classifier.classify(query) == classifier.classify(query)


def test_loan_limits_scenario(classifier):
    query_type, params = classifier.classify("What are the loan limits in CA?")
    assert query_type == QueryType.LOAN_LIMITS
    assert params["state"] == "CA"


def test_homeready_scenario_extracts_exact_params(classifier):
    query_type, params = classifier.classify("Is $75,000 income eligible for HomeReady in Los Angeles County, CA?")
    assert query_type == QueryType.AMI_HOMEREADY
    assert params == {"income": 75000, "state": "CA", "county": "Los Angeles"}


def test_investor_scenario_extracts_pool(classifier):
    query_type, params = classifier.classify("Show investor data for pool FN123456")
    assert query_type == QueryType.INVESTOR_TOOLS
    assert params["poolNumber"] == "FN123456"
    assert params["cusip"] == ""


def test_pricing_scenario(classifier):
    query_type, params = classifier.classify("Get pricing for $350,000 loan, 720 credit score, 85% LTV, purchase")
    assert query_type == QueryType.LOAN_PRICING
    assert params["loanAmount"] == 350000
    assert params["creditScore"] == 720
    assert params["ltv"] == 85
    assert params["purpose"] == "PURCHASE"
    assert params["noteRate"] == 0


@pytest.mark.parametrize("query, expected", [
    # pricing outranks mission
    ("What is the mission score and pricing for this loan?", QueryType.LOAN_PRICING),
    # SRP phrasing is excluded from the pricing rule
    ("Get SRP pricing", QueryType.SRP_PRICING),
    ("servicing released premium for a $400k loan", QueryType.SRP_PRICING),
    # ownership lookups outrank income eligibility
    ("Is this loan owned by Fannie Mae? Also check income eligibility", QueryType.LOAN_LOOKUP),
    ("Is $70k income HomeReady eligible in TX?", QueryType.AMI_HOMEREADY),
    ("Check MI termination eligibility", QueryType.MI_TERMINATION),
    ("Can I cancel PMI at 78% LTV?", QueryType.MI_TERMINATION),
    ("Check HiLo eligibility", QueryType.HILO_ELIGIBILITY),
    ("Submit property data", QueryType.PROPERTY_DATA),
    ("Get appraisal findings from DU", QueryType.APPRAISAL_FINDINGS),
    ("Get DU messages", QueryType.DU_MESSAGES),
    ("Housing market data for Texas", QueryType.HOUSING_PULSE),
    ("Manufactured housing in Florida", QueryType.MANUFACTURED_HOUSING),
    ("mobile home communities in AZ", QueryType.MANUFACTURED_HOUSING),
    ("Opportunity zones in Nevada", QueryType.OPPORTUNITY_ZONES),
    ("Look up CUSIP 3140X1234", QueryType.INVESTOR_TOOLS),
    # housing terms outrank construction
    ("construction activity in the housing market", QueryType.HOUSING_PULSE),
    ("Private residential construction spending", QueryType.CONSTRUCTION_SPENDING),
    # "hi" alone must not read as HiLo
    ("hi loan limits in CA", QueryType.LOAN_LIMITS),
    # "is the loan limit" is not an ownership question
    ("What is the loan limit in CA?", QueryType.LOAN_LIMITS),
    ("What is my loan limit in TX?", QueryType.LOAN_LIMITS),
    ("What is the loan limit for a $900,000 home in Orange County, CA?", QueryType.LOAN_LIMITS),
    ("Is the loan owned by Fannie Mae?", QueryType.LOAN_LOOKUP),
])
def test_rule_order_resolves_overlapping_vocabulary(classifier, query, expected):
    assert classifier.match_category(query) == expected


@pytest.mark.parametrize("query, expected_type", [
    ("What are the loan limits in CA?", QueryType.LOAN_LIMITS),
    ("Housing market data for Texas", QueryType.HOUSING_PULSE),
    ("Manufactured housing in Florida", QueryType.MANUFACTURED_HOUSING),
    ("Opportunity zones in Nevada", QueryType.OPPORTUNITY_ZONES),
    ("Is $70k income HomeReady eligible in TX?", QueryType.AMI_HOMEREADY),
    ("Get pricing for $400k loan, 740 score", QueryType.LOAN_PRICING),
    ("Get SRP pricing", QueryType.SRP_PRICING),
    ("Calculate mission score", QueryType.MISSION_SCORE),
    ("Show investor data for pool FN123456", QueryType.INVESTOR_TOOLS),
    ("Look up loan for borrower Smith at 123 Main St, Austin TX 78701", QueryType.LOAN_LOOKUP),
    ("Submit property data", QueryType.PROPERTY_DATA),
    ("Get appraisal findings", QueryType.APPRAISAL_FINDINGS),
    ("Get DU messages", QueryType.DU_MESSAGES),
    ("Check MI termination eligibility", QueryType.MI_TERMINATION),
    ("Check HiLo eligibility", QueryType.HILO_ELIGIBILITY),
    ("Private residential construction spending", QueryType.CONSTRUCTION_SPENDING),
])
def test_every_category_has_its_full_parameter_set(classifier, query, expected_type):
    query_type, params = classifier.classify(query)
    assert query_type == expected_type
    assert set(params) == PARAM_KEYS[expected_type]
    assert all(value is not None for value in params.values())


def test_missing_values_are_empty_not_none(classifier):
    _, params = classifier.classify("Calculate mission score")
    assert params == {"loanAmount": 0, "income": 0, "state": "", "county": "", "zipCode": ""}


def test_loan_lookup_extraction(classifier):
    _, params = classifier.classify("Look up loan for borrower Smith at 123 Main St, Austin TX 78701")
    assert params == {
        "borrowerLastName": "Smith",
        "propertyAddress": "123 Main St",
        "city": "Austin",
        "state": "TX",
        "zipCode": "78701",
    }


def test_mission_score_extraction(classifier):
    query_type, params = classifier.classify("Calculate mission score for a $300,000 loan with $60,000 income in TX")
    assert query_type == QueryType.MISSION_SCORE
    assert params["loanAmount"] == 300000
    assert params["income"] == 60000
    assert params["state"] == "TX"


def test_construction_path_extraction(classifier):
    _, params = classifier.classify("Private residential construction spending")
    assert params == {"section": "Private", "sector": "Residential", "subsector": ""}


def test_construction_defaults_to_total(classifier):
    _, params = classifier.classify("construction spending")
    assert params == {"section": "Total", "sector": "", "subsector": ""}


def test_bare_three_digit_number_is_read_as_credit_score(classifier):
    # Numeric extractors are independent: an unlabelled 3-digit number is
    # taken as a credit score even when it means something else.
    _, params = classifier.classify("Get pricing for a $300,000 loan on a 450 sq ft condo")
    assert params["creditScore"] == 450
    assert params["propertyType"] == "CONDOMINIUM"


def test_labelled_credit_score_wins_over_bare_number(classifier):
    _, params = classifier.classify("pricing for a 950 sq ft condo, $300,000 loan, FICO 745")
    assert params["creditScore"] == 745


def test_pricing_extracts_rate_ltv_and_score_independently(classifier):
    _, params = classifier.classify("pricing for $350,000 loan with 720 FICO at 6.5% rate and 80 LTV")
    assert params["loanAmount"] == 350000
    assert params["creditScore"] == 720
    assert params["noteRate"] == 6.5
    assert params["ltv"] == 80
