"""
Base Web3 Contract Service
Provides common read-only functionality for interacting with smart contracts
"""

from web3 import Web3
from web3.contract import Contract
from web3.exceptions import ContractLogicError, Web3Exception
from typing import Optional, Any
from django.conf import settings
import logging
import json

from supply_ledger.apps.pool.errors import OracleUnavailable

logger = logging.getLogger(__name__)


class BaseContractService:
    """Base class for Web3 contract reads"""

    def __init__(
        self,
        contract_address: str,
        abi_path: str,
        provider_url: Optional[str] = None,
        web3: Optional[Web3] = None,
    ):
        """
        Initialize the contract service

        Args:
            contract_address: The deployed contract address
            abi_path: Path to the contract ABI JSON file
            provider_url: Optional Web3 provider URL (defaults to settings)
            web3: Optional pre-built Web3 instance (skips provider setup)
        """
        self.provider_url = provider_url or settings.WEB3_PROVIDER_URL
        if web3 is None:
            web3 = Web3(Web3.HTTPProvider(
                self.provider_url,
                request_kwargs={"timeout": settings.WEB3_REQUEST_TIMEOUT},
            ))
            if not web3.is_connected():
                raise OracleUnavailable(f"Failed to connect to Web3 provider: {self.provider_url}")
        self.web3 = web3

        # Load ABI
        with open(abi_path, 'r') as f:
            abi = json.load(f)

        # Create contract instance
        self.contract_address = Web3.to_checksum_address(contract_address)
        self.contract: Contract = self.web3.eth.contract(
            address=self.contract_address,
            abi=abi
        )

        logger.info(f"Initialized contract at {self.contract_address}")

    def checksum_address(self, address: str) -> str:
        """Convert address to checksum format"""
        return Web3.to_checksum_address(address)

    def call_read_function(self, function_name: str, *args) -> Any:
        """
        Call a read-only contract function

        Args:
            function_name: Name of the function to call
            *args: Arguments to pass to the function

        Returns:
            Function result
        """
        try:
            function = getattr(self.contract.functions, function_name)
            return function(*args).call()
        except ContractLogicError as e:
            logger.error(f"Contract logic error in {function_name}: {e}")
            raise OracleUnavailable(f"{function_name} reverted: {e}") from e
        except (Web3Exception, ConnectionError, OSError) as e:
            logger.error(f"Error calling {function_name}: {e}")
            raise OracleUnavailable(f"{function_name} failed: {e}") from e

    def get_block_number(self) -> int:
        """Get current block number"""
        return self.web3.eth.block_number

    def get_latest_block_timestamp(self) -> int:
        """Timestamp (seconds) of the latest block"""
        try:
            return int(self.web3.eth.get_block('latest')['timestamp'])
        except (Web3Exception, ConnectionError, OSError) as e:
            logger.error(f"Error reading latest block: {e}")
            raise OracleUnavailable(f"latest block unavailable: {e}") from e
