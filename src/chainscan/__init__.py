# src/chainscan/__init__.py
from .crypto.checksum import ChecksumCodec
from .blockchain.models import Block, Transaction
from .exceptions import (
    ChainScanError,
    ConfigurationError,
    InvalidAddressFormat,
    ProviderError,
    ScanCancelled,
)
from .providers import ChainProvider, InMemoryProvider, Web3Provider
from .scanner import HistoryScanner, RetryPolicy, ScanResult

__version__ = "0.1.0"

__all__ = [
    'ChecksumCodec',
    'Block',
    'Transaction',
    'ChainScanError',
    'ConfigurationError',
    'InvalidAddressFormat',
    'ProviderError',
    'ScanCancelled',
    'ChainProvider',
    'InMemoryProvider',
    'Web3Provider',
    'HistoryScanner',
    'RetryPolicy',
    'ScanResult',
]
