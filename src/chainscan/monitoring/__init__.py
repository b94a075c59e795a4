from .metrics import ScanMetrics

__all__ = ['ScanMetrics']
