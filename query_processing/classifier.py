#!/usr/bin/env python3
"""
Query Classifier Module

This module classifies natural language mortgage questions into one of the
supported API categories and extracts the parameters that category needs.

Classification is an ordered list of keyword rules evaluated top to bottom;
the first rule that matches wins. Categories share vocabulary ("pricing" shows
up in both loan pricing and SRP questions, "housing" in both market and
manufactured housing questions), so the order is part of the behaviour: the
narrowest keyword sets come first and the catch-all GENERAL category last.
"""

import re
import logging
from typing import Any, Callable, Dict, List, Tuple

from query_processing import QueryType
from query_processing import extractors

logger = logging.getLogger("query-classifier")

Predicate = Callable[[str], bool]


def contains_any(*keywords: str) -> Predicate:
    """Predicate matching when any keyword is a substring of the query"""
    def predicate(query: str) -> bool:
        return any(keyword in query for keyword in keywords)
    return predicate


def matches_any(*patterns: str) -> Predicate:
    """Predicate matching when any regex is found in the query"""
    compiled = [re.compile(pattern) for pattern in patterns]

    def predicate(query: str) -> bool:
        return any(pattern.search(query) for pattern in compiled)
    return predicate


def either(*predicates: Predicate) -> Predicate:
    def predicate(query: str) -> bool:
        return any(p(query) for p in predicates)
    return predicate


def excluding(predicate: Predicate, *keywords: str) -> Predicate:
    """Wrap a predicate so it never matches when any of the keywords appear"""
    def wrapped(query: str) -> bool:
        if any(keyword in query for keyword in keywords):
            return False
        return predicate(query)
    return wrapped


def normalize_query(query_text: str) -> str:
    """Lowercase and collapse whitespace"""
    return " ".join(query_text.lower().split())


class QueryClassifier:
    """
    Classifies natural language queries into query types and extracts parameters.
    """

    def __init__(self):
        """Initialize the ordered classification rules"""
        # Most specific first. Do not reorder without checking the tie-break
        # tests: ambiguous queries resolve to the earliest matching rule.
        self.rules: List[Tuple[Predicate, QueryType]] = [
            # Identity / ownership lookups
            (either(
                contains_any("loan lookup", "look up loan", "look up a loan", "lookup loan", "look up my loan",
                             "owned by fannie", "fannie mae own", "loan owned", "owns my loan", "who owns"),
                matches_any(r"\bfind\s+(?:my\s+|a\s+|the\s+)?loan\b(?!\s+limit)", r"\bis\s+(?:this|my|the)\s+loan\b(?!\s+limits?)"),
            ), QueryType.LOAN_LOOKUP),

            # Income / eligibility
            (either(
                contains_any("homeready", "home ready", "area median income", "income limit"),
                matches_any(r"\bami\b", r"\bincome\b.*\beligib", r"\beligib\w*\b.*\bincome\b"),
            ), QueryType.AMI_HOMEREADY),

            # Pricing / adjustments (SRP phrasing is left for the SRP rule)
            (excluding(
                either(
                    contains_any("llpa", "loan pricing", "price adjustment", "loan-level price", "loan level price", "net price"),
                    matches_any(r"\bpricing\b"),
                ),
                "srp", "servicing released", "servicing premium", "buy up", "buy down", "buyup", "buydown",
            ), QueryType.LOAN_PRICING),

            # Mission / incentives
            (matches_any(r"\bmission"), QueryType.MISSION_SCORE),

            # Servicing released premium
            (either(
                contains_any("servicing released", "servicing premium", "buy up", "buy down", "buyup", "buydown"),
                matches_any(r"\bsrps?\b"),
            ), QueryType.SRP_PRICING),

            # Mortgage insurance cancellation
            (either(
                contains_any("mortgage insurance", "mi termination", "mi cancellation", "mi removal"),
                matches_any(r"\bpmi\b", r"\b(?:cancel|terminat|remov|drop|stop)\w*\s+(?:my\s+|the\s+)?mi\b"),
            ), QueryType.MI_TERMINATION),

            # High-LTV refinance
            (contains_any("hilo", "hi-lo", "high ltv", "high-ltv", "refinow", "refi now", "underwater"),
             QueryType.HILO_ELIGIBILITY),

            # Property data (UPD)
            (either(
                contains_any("uniform property", "property data", "submit property", "property valuation"),
                matches_any(r"\bupd\b"),
            ), QueryType.PROPERTY_DATA),

            # Appraisal / Collateral Underwriter
            (either(
                contains_any("appraisal", "collateral underwriter", "cu score", "cu risk"),
                matches_any(r"\bcu\b.*\bfindings\b"),
            ), QueryType.APPRAISAL_FINDINGS),

            # Underwriting messages
            (either(
                contains_any("desktop underwriter", "underwriting message", "underwriting finding", "casefile", "case file"),
                matches_any(r"\bdu\b"),
            ), QueryType.DU_MESSAGES),

            # Loan limits
            (contains_any("loan limit", "conforming limit", "conforming loan limit", "high balance limit", "high-balance limit"),
             QueryType.LOAN_LIMITS),

            # Housing market (manufactured housing has its own rule below)
            (excluding(
                contains_any("housing", "market", "home price", "home value", "inventory", "days on market",
                             "mortgage rate", "affordability"),
                "manufactured", "mobile home",
            ), QueryType.HOUSING_PULSE),

            # Manufactured housing
            (contains_any("manufactured", "mobile home", "mh communit"), QueryType.MANUFACTURED_HOUSING),

            # Opportunity zones
            (either(contains_any("opportunity zone"), matches_any(r"\boz\b", r"\bqozs?\b")),
             QueryType.OPPORTUNITY_ZONES),

            # Investor / securities
            (either(
                contains_any("investor", "cusip", "securit", "umbs"),
                matches_any(r"\bpools?\b", r"\bmbs\b"),
            ), QueryType.INVESTOR_TOOLS),

            # Construction spending
            (contains_any("construction"), QueryType.CONSTRUCTION_SPENDING),
        ]

        # Per-category parameter extractors
        self.extractors: Dict[QueryType, Callable[[str], Dict[str, Any]]] = {
            QueryType.LOAN_LIMITS: self._extract_location_params,
            QueryType.HOUSING_PULSE: self._extract_location_params,
            QueryType.MANUFACTURED_HOUSING: self._extract_location_params,
            QueryType.OPPORTUNITY_ZONES: self._extract_location_params,
            QueryType.INVESTOR_TOOLS: self._extract_investor_params,
            QueryType.LOAN_LOOKUP: self._extract_lookup_params,
            QueryType.AMI_HOMEREADY: self._extract_ami_params,
            QueryType.PROPERTY_DATA: self._extract_property_params,
            QueryType.APPRAISAL_FINDINGS: self._extract_appraisal_params,
            QueryType.DU_MESSAGES: self._extract_du_params,
            QueryType.LOAN_PRICING: self._extract_pricing_params,
            QueryType.MISSION_SCORE: self._extract_mission_params,
            QueryType.SRP_PRICING: self._extract_srp_params,
            QueryType.MI_TERMINATION: self._extract_mi_params,
            QueryType.HILO_ELIGIBILITY: self._extract_hilo_params,
            QueryType.CONSTRUCTION_SPENDING: self._extract_construction_params,
        }

    def classify(self, query_text: str) -> Tuple[QueryType, Dict[str, Any]]:
        """
        Classify a natural language query and extract its parameters

        Args:
            query_text: The natural language query to classify

        Returns:
            Tuple of (QueryType, parameters). Unmatched queries yield
            (QueryType.GENERAL, {}).
        """
        query_type = self.match_category(query_text)
        params = self.extract_parameters(query_text, query_type)
        logger.debug(f"Classified '{query_text}' as {query_type.value} with params {params}")
        return query_type, params

    def match_category(self, query_text: str) -> QueryType:
        """Return the query type of the first rule matching the query"""
        normalized_query = normalize_query(query_text)
        for predicate, query_type in self.rules:
            if predicate(normalized_query):
                return query_type
        return QueryType.GENERAL

    def extract_parameters(self, query_text: str, query_type: QueryType) -> Dict[str, Any]:
        """
        Extract relevant parameters from the query based on its type

        Args:
            query_text: The natural language query (original casing)
            query_type: The classified query type

        Returns:
            Dict of extracted parameters; missing values are "" or 0
        """
        extractor = self.extractors.get(query_type)
        if extractor is None:
            return {}
        return extractor(query_text)

    # -- per-category extraction -------------------------------------------------

    def _extract_location_params(self, query: str) -> Dict[str, Any]:
        return extractors.extract_location(query)

    def _extract_ami_params(self, query: str) -> Dict[str, Any]:
        return {
            "income": extractors.extract_income(query),
            "state": extractors.extract_state(query),
            "county": extractors.extract_county(query),
        }

    def _extract_pricing_params(self, query: str) -> Dict[str, Any]:
        """Pricing inputs plus the optional loan attributes the pricer accepts"""
        return {
            "loanAmount": extractors.extract_loan_amount(query),
            "noteRate": extractors.extract_note_rate(query),
            "ltv": extractors.extract_ltv(query),
            "creditScore": extractors.extract_credit_score(query),
            "state": extractors.extract_state(query),
            "county": extractors.extract_county(query),
            "purpose": extractors.extract_loan_purpose(query),
            "propertyType": extractors.extract_property_type(query),
            "occupancyType": extractors.extract_occupancy(query),
        }

    def _extract_srp_params(self, query: str) -> Dict[str, Any]:
        return {
            "loanAmount": extractors.extract_loan_amount(query),
            "noteRate": extractors.extract_note_rate(query),
            "ltv": extractors.extract_ltv(query),
            "creditScore": extractors.extract_credit_score(query),
        }

    def _extract_mission_params(self, query: str) -> Dict[str, Any]:
        location = extractors.extract_location(query)
        return {
            "loanAmount": extractors.extract_loan_amount(query),
            "income": extractors.extract_income(query),
            **location,
        }

    def _extract_investor_params(self, query: str) -> Dict[str, Any]:
        return {
            "poolNumber": extractors.extract_pool_number(query),
            "cusip": extractors.extract_cusip(query),
        }

    def _extract_lookup_params(self, query: str) -> Dict[str, Any]:
        address, city = extractors.extract_property_address(query)
        return {
            "borrowerLastName": extractors.extract_borrower_last_name(query),
            "propertyAddress": address,
            "city": city,
            "state": extractors.extract_state(query),
            "zipCode": extractors.extract_zip_code(query),
        }

    def _extract_property_params(self, query: str) -> Dict[str, Any]:
        address, city = extractors.extract_property_address(query)
        return {
            "propertyAddress": address,
            "city": city,
            "state": extractors.extract_state(query),
            "zipCode": extractors.extract_zip_code(query),
            "propertyType": extractors.extract_property_type(query),
        }

    def _extract_appraisal_params(self, query: str) -> Dict[str, Any]:
        return {"documentFileId": extractors.extract_document_file_id(query)}

    def _extract_du_params(self, query: str) -> Dict[str, Any]:
        return {"casefileId": extractors.extract_casefile_id(query)}

    def _extract_mi_params(self, query: str) -> Dict[str, Any]:
        return {
            "loanAmount": extractors.extract_loan_amount(query),
            "ltv": extractors.extract_ltv(query),
            "state": extractors.extract_state(query),
        }

    def _extract_hilo_params(self, query: str) -> Dict[str, Any]:
        return {
            "loanAmount": extractors.extract_loan_amount(query),
            "ltv": extractors.extract_ltv(query),
            "creditScore": extractors.extract_credit_score(query),
            "state": extractors.extract_state(query),
        }

    def _extract_construction_params(self, query: str) -> Dict[str, Any]:
        section, sector, subsector = extractors.extract_construction_path(query)
        return {"section": section, "sector": sector, "subsector": subsector}


if __name__ == "__main__":
    # Example usage
    test_queries = [
        "What are the loan limits in CA?",
        "Is $75,000 income eligible for HomeReady in Los Angeles County, CA?",
        "Show investor data for pool FN123456",
        "Get pricing for $350,000 loan, 720 credit score, 85% LTV, purchase",
        "Private residential construction spending",
        "hello",
    ]

    classifier = QueryClassifier()
    for query in test_queries:
        query_type, params = classifier.classify(query)
        print(f"\nQuery: {query}")
        print(f"Query Type: {query_type.value}")
        print(f"Parameters: {params}")
