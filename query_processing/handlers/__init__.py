"""
Query Processing Handlers Package

This package contains specialized handlers for different query types.
Each handler implements processing logic for a specific query type.
"""

from .base_handler import DispatchResult, QueryHandler
from .market_handlers import (
    ConstructionSpendingHandler,
    HousingPulseHandler,
    InvestorToolsHandler,
    LoanLimitsHandler,
    ManufacturedHousingHandler,
    OpportunityZonesHandler,
)
from .origination_handlers import (
    AmiHomeReadyHandler,
    AppraisalFindingsHandler,
    DuMessagesHandler,
    LoanLookupHandler,
    PropertyDataHandler,
)
from .pricing_handlers import LoanPricingHandler, MissionScoreHandler, SrpPricingHandler
from .servicing_handlers import HiloEligibilityHandler, MiTerminationHandler
from .general_handler import CAPABILITY_MENU, GeneralQueryHandler

__all__ = [
    'DispatchResult',
    'QueryHandler',
    'LoanLimitsHandler',
    'HousingPulseHandler',
    'ManufacturedHousingHandler',
    'OpportunityZonesHandler',
    'InvestorToolsHandler',
    'ConstructionSpendingHandler',
    'LoanLookupHandler',
    'AmiHomeReadyHandler',
    'PropertyDataHandler',
    'AppraisalFindingsHandler',
    'DuMessagesHandler',
    'LoanPricingHandler',
    'MissionScoreHandler',
    'SrpPricingHandler',
    'MiTerminationHandler',
    'HiloEligibilityHandler',
    'GeneralQueryHandler',
    'CAPABILITY_MENU',
]
