# src/chainscan/scanner/history.py
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Iterator, List, Optional
import logging
import threading
import time

from ..blockchain.models import Block, Transaction
from ..crypto.checksum import ChecksumCodec
from ..exceptions import InvalidAddressFormat, ProviderError, ScanCancelled
from ..monitoring.metrics import ScanMetrics
from ..providers.base import ChainProvider
from ..utils.config import Config

logger = logging.getLogger(__name__)


@dataclass
class RetryPolicy:
    """Per-height retry of failed block fetches. One attempt means fail fast."""
    max_attempts: int = Config.MAX_ATTEMPTS
    backoff_base: float = Config.RETRY_BACKOFF_BASE
    max_backoff: float = Config.MAX_RETRY_BACKOFF

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    def delay(self, attempt: int) -> float:
        """Seconds to wait after the given (1-based) failed attempt"""
        return min(self.backoff_base * (2 ** (attempt - 1)), self.max_backoff)


@dataclass
class ScanResult:
    """Transactions touching the target, in the order they were visited"""
    target: str
    start_height: int
    transactions: List[Transaction] = field(default_factory=list)
    end_height: Optional[int] = None  # lowest height visited
    blocks_scanned: int = 0
    blocks_missing: int = 0

    def __len__(self) -> int:
        return len(self.transactions)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(self.transactions)

    def __getitem__(self, index):
        return self.transactions[index]

    def __bool__(self) -> bool:
        return bool(self.transactions)


class HistoryScanner:
    """Walks recent blocks downwards from the chain head collecting the
    transactions sent or received by an address.

    A failed fetch aborts the whole scan with a ProviderError carrying the
    failing height, so a caller can resume with start_height. Heights with
    no block are skipped.

    The cancel event is checked before every fetch when scanning
    sequentially. With prefetch_workers > 1 it is checked once per window,
    so up to prefetch_workers fetches may still run after cancellation.
    """

    def __init__(
        self,
        provider: ChainProvider,
        retry_policy: Optional[RetryPolicy] = None,
        prefetch_workers: int = Config.PREFETCH_WORKERS,
        metrics: Optional[ScanMetrics] = None,
        sleep=time.sleep
    ):
        if prefetch_workers < 1:
            raise ValueError("prefetch_workers must be at least 1")
        self.provider = provider
        self.retry_policy = retry_policy or RetryPolicy()
        self.prefetch_workers = prefetch_workers
        self.metrics = metrics
        self._sleep = sleep

    def scan(
        self,
        target_address: str,
        block_count: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
        start_height: Optional[int] = None
    ) -> ScanResult:
        """Scan block_count blocks (default 1000) ending at the chain head or start_height"""
        target = ChecksumCodec.encode(target_address)
        if block_count is None:
            block_count = Config.DEFAULT_BLOCK_COUNT
        if block_count < 0:
            raise ValueError(f"block_count must be non-negative, got {block_count}")

        start = self._current_height() if start_height is None else start_height
        # Heights below zero do not exist; the range stops at genesis.
        heights = range(start, max(start - block_count, -1), -1)

        result = ScanResult(target=target, start_height=start)
        logger.info(f"Scanning {len(heights)} blocks from {start} for {target}")

        if self.prefetch_workers > 1 and len(heights) > 1:
            self._scan_prefetched(heights, target, result, cancel_event)
        else:
            for height in heights:
                self._check_cancelled(cancel_event, height)
                self._visit(height, self._fetch_block(height), target, result)

        logger.info(
            f"Scan for {target} finished: {len(result)} transactions in "
            f"{result.blocks_scanned} blocks ({result.blocks_missing} missing)"
        )
        return result

    def _scan_prefetched(self, heights, target: str, result: ScanResult,
                         cancel_event: Optional[threading.Event]) -> None:
        """Fetch windows of heights in parallel, then match them in descending order"""
        window = self.prefetch_workers
        with ThreadPoolExecutor(max_workers=window) as executor:
            for offset in range(0, len(heights), window):
                batch = heights[offset:offset + window]
                self._check_cancelled(cancel_event, batch[0])
                futures = [executor.submit(self._fetch_block, height) for height in batch]
                try:
                    for height, future in zip(batch, futures):
                        self._visit(height, future.result(), target, result)
                except Exception:
                    for future in futures:
                        future.cancel()
                    raise

    def _visit(self, height: int, block: Optional[Block], target: str, result: ScanResult) -> None:
        result.end_height = height
        if block is None:
            logger.debug(f"No block at height {height}, skipping")
            result.blocks_missing += 1
            return

        result.blocks_scanned += 1
        for tx in block.transactions:
            try:
                matched = self._matches(tx, target)
            except InvalidAddressFormat as e:
                raise ProviderError(
                    f"Malformed transaction {tx.hash} in block {height}: {e}",
                    height=height,
                    original_error=e
                ) from e
            if matched:
                result.transactions.append(tx)
                if self.metrics:
                    self.metrics.record_match()
        logger.debug(f"Block {height}: {len(block.transactions)} transactions, {len(result)} matched so far")

    @staticmethod
    def _matches(tx: Transaction, target: str) -> bool:
        sender = ChecksumCodec.encode(tx.from_address)
        if sender == target:
            return True
        if tx.to_address is None:
            return False
        return ChecksumCodec.encode(tx.to_address) == target

    @staticmethod
    def _check_cancelled(cancel_event: Optional[threading.Event], height: int) -> None:
        if cancel_event is not None and cancel_event.is_set():
            logger.info(f"Scan cancelled before block {height}")
            raise ScanCancelled(height)

    def _current_height(self) -> int:
        try:
            return self.provider.current_height()
        except ProviderError:
            self._record_error()
            raise
        except Exception as e:
            self._record_error()
            raise ProviderError(f"Failed to read current height: {e}", original_error=e) from e

    def _fetch_block(self, height: int) -> Optional[Block]:
        """Fetch one block, retrying per the retry policy"""
        attempts = self.retry_policy.max_attempts
        for attempt in range(1, attempts + 1):
            started = time.monotonic()
            try:
                block = self.provider.block_with_transactions(height)
            except ProviderError as e:
                error = e
                if error.height is None:
                    error.height = height
            except Exception as e:
                error = ProviderError(f"Failed to fetch block {height}: {e}", height=height, original_error=e)
                error.__cause__ = e
            else:
                if self.metrics:
                    self.metrics.record_block(block, time.monotonic() - started)
                return block

            self._record_error()
            if attempt == attempts:
                raise error
            delay = self.retry_policy.delay(attempt)
            logger.warning(f"Retry {attempt}/{attempts - 1} for block {height} in {delay:.1f}s: {error}")
            self._sleep(delay)

    def _record_error(self) -> None:
        if self.metrics:
            self.metrics.record_error()
