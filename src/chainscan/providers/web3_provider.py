# src/chainscan/providers/web3_provider.py
from typing import Optional
import logging

from web3 import Web3
from web3.exceptions import BlockNotFound

from .base import ChainProvider
from ..blockchain.models import Block
from ..crypto.checksum import ChecksumCodec
from ..exceptions import ProviderError
from ..utils.config import Config

logger = logging.getLogger(__name__)


class Web3Provider(ChainProvider):
    """JSON-RPC chain provider backed by web3.py's HTTPProvider"""

    def __init__(
        self,
        rpc_url: str = Config.DEFAULT_RPC_URL,
        timeout: float = Config.RPC_TIMEOUT,
        web3: Optional[Web3] = None
    ):
        self.rpc_url = rpc_url
        self.web3 = web3 or Web3(
            Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout})
        )

    def current_height(self) -> int:
        try:
            return int(self.web3.eth.block_number)
        except Exception as e:
            raise ProviderError(
                f"Failed to read block height from {self.rpc_url}: {e}",
                original_error=e
            ) from e

    def block_with_transactions(self, height: int) -> Optional[Block]:
        try:
            raw = self.web3.eth.get_block(height, full_transactions=True)
        except BlockNotFound:
            logger.debug(f"No block at height {height}")
            return None
        except Exception as e:
            raise ProviderError(
                f"Failed to fetch block {height}: {e}",
                height=height,
                original_error=e
            ) from e

        if raw is None:
            return None
        try:
            return Block.from_rpc(raw)
        except (KeyError, TypeError, ValueError) as e:
            raise ProviderError(
                f"Malformed block {height}: {e}",
                height=height,
                original_error=e
            ) from e

    def balance(self, address: str) -> int:
        checksummed = ChecksumCodec.encode(address)
        try:
            return int(self.web3.eth.get_balance(checksummed))
        except Exception as e:
            raise ProviderError(
                f"Failed to read balance of {checksummed}: {e}",
                original_error=e
            ) from e
