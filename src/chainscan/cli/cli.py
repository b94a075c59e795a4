# src/chainscan/cli/cli.py
import argparse
import signal
import sys
import threading
from typing import Callable, List, Optional

from web3 import Web3

from ..config.scanner_config import ScannerConfig
from ..crypto.checksum import ChecksumCodec
from ..exceptions import ChainScanError, ProviderError, ScanCancelled
from ..monitoring.metrics import ScanMetrics
from ..providers.base import ChainProvider
from ..providers.memory import InMemoryProvider
from ..providers.web3_provider import Web3Provider
from ..scanner.history import HistoryScanner, RetryPolicy
from ..utils.logger import setup_logging

ProviderFactory = Callable[[argparse.Namespace, ScannerConfig], ChainProvider]


def default_provider(args: argparse.Namespace, config: ScannerConfig) -> ChainProvider:
    if args.replay:
        return InMemoryProvider.from_file(args.replay)
    return Web3Provider(config.get('rpc.url'), timeout=config.get('rpc.timeout'))


class CLI:
    def __init__(self, provider_factory: Optional[ProviderFactory] = None):
        self.provider_factory = provider_factory or default_provider
        self.config = None
        self.metrics = None

    def main(self, args: List[str]) -> int:
        parser = self.create_parser()
        args = parser.parse_args(args)

        if not hasattr(args, 'func'):
            parser.print_help()
            return 1

        try:
            self.config = ScannerConfig(args.config)
            if args.rpc_url:
                self.config.update('rpc.url', args.rpc_url, persist=False)
            setup_logging(
                args.log_level or self.config.get('monitoring.log_level'),
                args.log_dir or self.config.get('monitoring.log_dir')
            )
            metrics_port = args.metrics_port or self.config.get('monitoring.metrics_port')
            self.metrics = ScanMetrics()
            if metrics_port:
                self.metrics.start_server(int(metrics_port))
            return args.func(args)
        except ScanCancelled as e:
            self._report_error(e)
            return 2
        except (ChainScanError, ValueError) as e:
            self._report_error(e)
            return 1

    def create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(description='chainscan: EVM address checksums and history scans')
        parser.add_argument('--config', help='YAML configuration file')
        parser.add_argument('--rpc-url', help='JSON-RPC endpoint (overrides config)')
        parser.add_argument('--replay', help='Serve blocks from a JSON replay file instead of RPC')
        parser.add_argument('--log-level', help='Logging level (DEBUG, INFO, ...)')
        parser.add_argument('--log-dir', help='Also write rotating log files here')
        parser.add_argument('--metrics-port', type=int, help='Expose prometheus metrics on this port')
        subparsers = parser.add_subparsers(title='commands', dest='command')

        checksum = subparsers.add_parser('checksum', help='Print the checksummed form of an address')
        checksum.add_argument('address', help='Address, any case')
        checksum.set_defaults(func=self.checksum)

        validate = subparsers.add_parser('validate', help='Check an address checksum')
        validate.add_argument('address', help='Address to check')
        validate.set_defaults(func=self.validate)

        balance = subparsers.add_parser('balance', help='Get the balance of an address')
        balance.add_argument('address', help='Account address')
        balance.set_defaults(func=self.balance)

        history = subparsers.add_parser('history', help='Find transactions of an address in recent blocks')
        history.add_argument('address', help='Account address')
        history.add_argument('block_count', type=int, nargs='?', help='Number of blocks to scan')
        history.add_argument('--start-height', type=int, help='Scan downwards from this height instead of the head')
        history.add_argument('--workers', type=int, help='Blocks fetched in parallel')
        history.add_argument('--retries', type=int, help='Extra attempts per failed block fetch')
        history.set_defaults(func=self.history)

        return parser

    def checksum(self, args) -> int:
        print(ChecksumCodec.encode(args.address))
        return 0

    def validate(self, args) -> int:
        if ChecksumCodec.validate(args.address):
            print(f"{args.address}: valid")
            return 0
        print(f"{args.address}: invalid (expected {ChecksumCodec.encode(args.address)})")
        return 1

    def balance(self, args) -> int:
        address = ChecksumCodec.encode(args.address)
        provider = self.provider_factory(args, self.config)
        wei = provider.balance(address)
        print(f"Account address: {address}")
        print(f"Balance: {wei} wei ({Web3.from_wei(wei, 'ether')} ether)")
        return 0

    def history(self, args) -> int:
        block_count = args.block_count
        if block_count is None:
            block_count = self.config.get('scan.block_count')
        workers = args.workers or self.config.get('scan.prefetch_workers')
        max_attempts = self.config.get('scan.max_attempts')
        if args.retries is not None:
            max_attempts = args.retries + 1

        provider = self.provider_factory(args, self.config)
        scanner = HistoryScanner(
            provider,
            retry_policy=RetryPolicy(
                max_attempts=max_attempts,
                backoff_base=self.config.get('scan.backoff_base'),
                max_backoff=self.config.get('scan.max_backoff')
            ),
            prefetch_workers=workers,
            metrics=self.metrics
        )

        cancel_event = threading.Event()
        previous = self._install_interrupt_handler(cancel_event)
        try:
            result = scanner.scan(
                args.address,
                block_count,
                cancel_event=cancel_event,
                start_height=args.start_height
            )
        finally:
            if previous is not None:
                signal.signal(signal.SIGINT, previous)

        if not result:
            print("No transactions found")
            return 0

        print(f"Transaction history for {result.target} "
              f"(blocks {result.start_height}..{result.end_height}):")
        for tx in result:
            recipient = tx.to_address or "(contract creation)"
            print(f"  block {tx.block_number}  {tx.hash}  {tx.from_address} -> {recipient}  {tx.value} wei")
        return 0

    @staticmethod
    def _install_interrupt_handler(cancel_event: threading.Event):
        if threading.current_thread() is not threading.main_thread():
            return None
        return signal.signal(signal.SIGINT, lambda signum, frame: cancel_event.set())

    @staticmethod
    def _report_error(error: Exception):
        message = f"Error ({type(error).__name__}): {error}"
        if isinstance(error, ProviderError) and error.height is not None:
            message += f"\nResume with: history --start-height {error.height}"
        print(message, file=sys.stderr)


def main() -> int:
    cli = CLI()
    return cli.main(sys.argv[1:])


if __name__ == "__main__":
    sys.exit(main())
