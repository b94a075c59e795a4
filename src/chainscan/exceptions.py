# src/chainscan/exceptions.py
from typing import Optional


class ChainScanError(Exception):
    """Base exception class for chainscan errors"""
    pass


class InvalidAddressFormat(ChainScanError, ValueError):
    """Raised when an address is not 40 hex characters (optionally 0x-prefixed)"""

    def __init__(self, address, reason: str = "expected 40 hex characters"):
        self.address = address
        self.reason = reason
        super().__init__(f"Invalid address {address!r}: {reason}")


class ProviderError(ChainScanError):
    """Raised when the chain provider fails to return height or block data"""

    def __init__(
        self,
        message: str,
        height: Optional[int] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.height = height
        self.original_error = original_error

    def __str__(self) -> str:
        if self.height is None:
            return self.message
        return f"{self.message} [height={self.height}]"


class ScanCancelled(ChainScanError):
    """Raised when a scan is stopped by its cancel event"""

    def __init__(self, height: int):
        super().__init__(f"Scan cancelled before block {height}")
        self.height = height


class ConfigurationError(ChainScanError):
    """Raised when the configuration file cannot be loaded"""
    pass
