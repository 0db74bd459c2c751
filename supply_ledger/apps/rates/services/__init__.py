from .base_contract import BaseContractService
from .comet_rates import CometRateService

__all__ = ["BaseContractService", "CometRateService"]
