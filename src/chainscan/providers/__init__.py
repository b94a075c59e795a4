from .base import ChainProvider
from .memory import InMemoryProvider
from .web3_provider import Web3Provider

__all__ = ['ChainProvider', 'InMemoryProvider', 'Web3Provider']
