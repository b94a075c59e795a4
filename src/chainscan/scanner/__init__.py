from .history import HistoryScanner, RetryPolicy, ScanResult

__all__ = ['HistoryScanner', 'RetryPolicy', 'ScanResult']
