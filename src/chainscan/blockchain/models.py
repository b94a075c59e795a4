# src/chainscan/blockchain/models.py
from typing import Any, List, Mapping, Optional

from eth_utils import encode_hex
from pydantic import BaseModel, Field, field_validator

from ..crypto.checksum import ChecksumCodec


def _hex(value: Any) -> Optional[str]:
    """Render HexBytes/bytes from an RPC response as a 0x-prefixed string"""
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        return encode_hex(bytes(value))
    return str(value)


class Transaction(BaseModel):
    hash: str
    block_number: int
    transaction_index: int = 0
    from_address: str
    to_address: Optional[str] = None  # None for contract creation
    value: int = 0

    @field_validator("from_address", "to_address")
    @classmethod
    def check_address(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            ChecksumCodec.to_hex_digits(value)
        return value

    @property
    def is_contract_creation(self) -> bool:
        return self.to_address is None

    @classmethod
    def from_rpc(cls, raw: Mapping[str, Any], block_number: Optional[int] = None) -> "Transaction":
        """Build from an eth_getBlockByNumber transaction object"""
        number = raw.get("blockNumber")
        return cls(
            hash=_hex(raw["hash"]),
            block_number=number if number is not None else block_number,
            transaction_index=raw.get("transactionIndex") or 0,
            from_address=_hex(raw["from"]),
            to_address=_hex(raw.get("to")),
            value=raw.get("value") or 0
        )


class Block(BaseModel):
    number: int
    hash: Optional[str] = None
    transactions: List[Transaction] = Field(default_factory=list)

    @classmethod
    def from_rpc(cls, raw: Mapping[str, Any]) -> "Block":
        """Build from an eth_getBlockByNumber result with full transactions"""
        number = raw["number"]
        return cls(
            number=number,
            hash=_hex(raw.get("hash")),
            transactions=[
                Transaction.from_rpc(tx, block_number=number)
                for tx in raw.get("transactions", [])
            ]
        )
