"""
Query Processing Package

This package turns free-text mortgage questions into Data Provider calls and
formatted Markdown answers.

Components:
- extractors: Pure parameter-extraction primitives
- classifier: Ordered keyword-rule classification and per-category extraction
- handlers: One handler per query type (validation, request building, formatting)
- processor: Handler registry and dispatch
- integration: The handle_query boundary used by the Flask app
"""

from enum import Enum

class QueryType(Enum):
    """Enumeration of supported query types"""
    LOAN_LIMITS = "loan_limits"                      # Conforming loan limits by location
    HOUSING_PULSE = "housing_pulse"                  # Housing market metrics
    MANUFACTURED_HOUSING = "manufactured_housing"    # MH community statistics
    OPPORTUNITY_ZONES = "opportunity_zones"          # Qualified opportunity zones
    INVESTOR_TOOLS = "investor_tools"                # MBS pool / security data
    LOAN_LOOKUP = "loan_lookup"                      # Is the loan owned by Fannie Mae?
    AMI_HOMEREADY = "ami_homeready"                  # Area median income / HomeReady eligibility
    PROPERTY_DATA = "property_data"                  # Uniform Property Dataset submission
    APPRAISAL_FINDINGS = "appraisal_findings"        # Collateral Underwriter findings
    DU_MESSAGES = "du_messages"                      # Desktop Underwriter messages
    LOAN_PRICING = "loan_pricing"                    # Pricing with LLPAs
    MISSION_SCORE = "mission_score"                  # Affordable lending score
    SRP_PRICING = "srp_pricing"                      # Servicing released premium
    MI_TERMINATION = "mi_termination"                # Mortgage insurance cancellation
    HILO_ELIGIBILITY = "hilo_eligibility"            # High-LTV refinance
    CONSTRUCTION_SPENDING = "construction_spending"  # Construction spending series
    GENERAL = "general"                              # Help menu / could not classify

    @classmethod
    def from_value(cls, value: str) -> "QueryType":
        """Resolve a category string, falling back to GENERAL for unknown values"""
        for query_type in cls:
            if query_type.value == value:
                return query_type
        return cls.GENERAL

# Import key components for external use
from .classifier import QueryClassifier
from .processor import DispatchResult, dispatch, process_query
from .integration import extract_chat_request, handle_query

__all__ = ['QueryType', 'QueryClassifier', 'DispatchResult', 'dispatch', 'process_query', 'handle_query', 'extract_chat_request']
