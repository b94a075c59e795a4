from .scanner_config import ScannerConfig

__all__ = ['ScannerConfig']
