# src/chainscan/providers/memory.py
from typing import Dict, Iterable, Optional
import json

from .base import ChainProvider
from ..blockchain.models import Block
from ..crypto.checksum import ChecksumCodec
from ..exceptions import ProviderError


class InMemoryProvider(ChainProvider):
    """Chain provider serving blocks held in memory.

    Used for tests and for replaying a previously captured block range from
    a JSON file (see from_file).
    """

    def __init__(
        self,
        blocks: Optional[Iterable[Block]] = None,
        height: Optional[int] = None,
        balances: Optional[Dict[str, int]] = None
    ):
        self.blocks: Dict[int, Block] = {}
        self.height = height
        self.balances = {
            ChecksumCodec.encode(address): amount
            for address, amount in (balances or {}).items()
        }
        for block in blocks or []:
            self.add_block(block)

    @classmethod
    def from_file(cls, path: str) -> 'InMemoryProvider':
        """Load a replay log: {"height": N, "blocks": [...], "balances": {...}}"""
        try:
            with open(path, "r") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise ProviderError(f"Could not load replay file {path}: {e}", original_error=e) from e

        if not isinstance(data, dict):
            raise ProviderError(f"Replay file {path} must contain a JSON object")
        height = data.get("height")
        if height is not None and (isinstance(height, bool) or not isinstance(height, int)):
            raise ProviderError(f"Replay file {path}: height must be an integer, got {height!r}")
        if not isinstance(data.get("blocks", []), list):
            raise ProviderError(f"Replay file {path}: blocks must be a list")
        if not isinstance(data.get("balances") or {}, dict):
            raise ProviderError(f"Replay file {path}: balances must be an object")

        try:
            blocks = [Block.model_validate(block) for block in data.get("blocks", [])]
            return cls(blocks, height=height, balances=data.get("balances"))
        except ValueError as e:
            raise ProviderError(f"Invalid data in replay file {path}: {e}", original_error=e) from e

    def add_block(self, block: Block) -> None:
        self.blocks[block.number] = block

    def current_height(self) -> int:
        if self.height is not None:
            return self.height
        return max(self.blocks, default=0)

    def block_with_transactions(self, height: int) -> Optional[Block]:
        return self.blocks.get(height)

    def balance(self, address: str) -> int:
        return self.balances.get(ChecksumCodec.encode(address), 0)
