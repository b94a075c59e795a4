# src/chainscan/providers/base.py
from abc import ABC, abstractmethod
from typing import Optional

from ..blockchain.models import Block


class ChainProvider(ABC):
    """Source of chain data for the history scanner.

    Implementations raise ProviderError for transport, decoding or rate-limit
    failures. A height with no block is reported by returning None.
    """

    @abstractmethod
    def current_height(self) -> int:
        """Return the number of the latest block"""
        pass

    @abstractmethod
    def block_with_transactions(self, height: int) -> Optional[Block]:
        """Return the block at a height with full transaction objects, or None"""
        pass

    @abstractmethod
    def balance(self, address: str) -> int:
        """Return the native balance of an address in wei"""
        pass
