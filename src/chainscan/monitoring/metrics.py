# src/chainscan/monitoring/metrics.py

from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Histogram, start_http_server

from ..utils.config import Config


class ScanMetrics:
    def __init__(
        self,
        registry: Optional[CollectorRegistry] = None,
        namespace: str = Config.METRICS_NAMESPACE
    ):
        # Private registry so several collectors can coexist in one process
        self.registry = registry if registry is not None else CollectorRegistry()

        self.blocks_fetched = Counter(
            'blocks_fetched', 'Blocks returned by the provider',
            namespace=namespace, registry=self.registry)
        self.blocks_missing = Counter(
            'blocks_missing', 'Heights for which the provider had no block',
            namespace=namespace, registry=self.registry)
        self.transactions_inspected = Counter(
            'transactions_inspected', 'Transactions compared against the target',
            namespace=namespace, registry=self.registry)
        self.transactions_matched = Counter(
            'transactions_matched', 'Transactions sent or received by the target',
            namespace=namespace, registry=self.registry)
        self.provider_errors = Counter(
            'provider_errors', 'Failed provider calls, including retried ones',
            namespace=namespace, registry=self.registry)
        self.block_fetch_seconds = Histogram(
            'block_fetch_seconds', 'Block fetch latency',
            namespace=namespace, registry=self.registry)

    def start_server(self, port: int):
        start_http_server(port, registry=self.registry)

    def record_block(self, block, elapsed: float):
        self.block_fetch_seconds.observe(elapsed)
        if block is None:
            self.blocks_missing.inc()
            return
        self.blocks_fetched.inc()
        self.transactions_inspected.inc(len(block.transactions))

    def record_match(self):
        self.transactions_matched.inc()

    def record_error(self):
        self.provider_errors.inc()
