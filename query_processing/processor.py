#!/usr/bin/env python3
"""
Query Processor Module

This module routes classified queries to their handlers. Each dispatch is
independent: the handler either asks for missing parameters or makes one
Data Provider call and formats the response.
"""

import logging
from typing import Dict, Any, Optional, Union

from data_provider import get_data_provider
from query_processing import QueryType
from query_processing.classifier import QueryClassifier
from query_processing.handlers import (
    AmiHomeReadyHandler,
    AppraisalFindingsHandler,
    ConstructionSpendingHandler,
    DispatchResult,
    DuMessagesHandler,
    GeneralQueryHandler,
    HiloEligibilityHandler,
    HousingPulseHandler,
    InvestorToolsHandler,
    LoanLimitsHandler,
    LoanLookupHandler,
    LoanPricingHandler,
    ManufacturedHousingHandler,
    MiTerminationHandler,
    MissionScoreHandler,
    OpportunityZonesHandler,
    PropertyDataHandler,
    QueryHandler,
    SrpPricingHandler,
)

logger = logging.getLogger("query-processor")

# Handler mapping
HANDLERS: Dict[QueryType, QueryHandler] = {
    QueryType.LOAN_LIMITS: LoanLimitsHandler(),
    QueryType.HOUSING_PULSE: HousingPulseHandler(),
    QueryType.MANUFACTURED_HOUSING: ManufacturedHousingHandler(),
    QueryType.OPPORTUNITY_ZONES: OpportunityZonesHandler(),
    QueryType.INVESTOR_TOOLS: InvestorToolsHandler(),
    QueryType.CONSTRUCTION_SPENDING: ConstructionSpendingHandler(),
    QueryType.LOAN_LOOKUP: LoanLookupHandler(),
    QueryType.AMI_HOMEREADY: AmiHomeReadyHandler(),
    QueryType.PROPERTY_DATA: PropertyDataHandler(),
    QueryType.APPRAISAL_FINDINGS: AppraisalFindingsHandler(),
    QueryType.DU_MESSAGES: DuMessagesHandler(),
    QueryType.LOAN_PRICING: LoanPricingHandler(),
    QueryType.MISSION_SCORE: MissionScoreHandler(),
    QueryType.SRP_PRICING: SrpPricingHandler(),
    QueryType.MI_TERMINATION: MiTerminationHandler(),
    QueryType.HILO_ELIGIBILITY: HiloEligibilityHandler(),
    QueryType.GENERAL: GeneralQueryHandler(),
}

classifier = QueryClassifier()


def dispatch(query_type: Union[QueryType, str], params: Dict[str, Any], provider=None) -> DispatchResult:
    """
    Produce the answer for an already classified query

    Args:
        query_type: QueryType (or its string value); unknown values get the help menu
        params: Extracted parameters for that query type
        provider: DataProvider to use; the configured provider when None

    Returns:
        DispatchResult with formatted content, raw data (None for clarifications
        and the menu) and the query type that answered
    """
    if not isinstance(query_type, QueryType):
        query_type = QueryType.from_value(str(query_type))

    handler = HANDLERS.get(query_type, HANDLERS[QueryType.GENERAL])

    if provider is None:
        provider = get_data_provider()

    result = handler.handle(params or {}, provider)
    logger.info(f"Dispatched {result.query_type.value} ({'resolved' if result.data is not None else 'awaiting params'})")
    return result


def process_query(query_text: str, provider=None) -> DispatchResult:
    """
    Classify a natural language query and dispatch it

    Args:
        query_text: The natural language query
        provider: Optional DataProvider override

    Returns:
        DispatchResult for the query
    """
    query_type, params = classifier.classify(query_text)
    return dispatch(query_type, params, provider)
