# src/chainscan/crypto/checksum.py
from eth_utils import keccak

from ..exceptions import InvalidAddressFormat

HEX_DIGITS = frozenset("0123456789abcdef")


class ChecksumCodec:
    """EIP-55 mixed-case checksum encoding for EVM addresses.

    The case of every letter in the checksummed form is decided by the
    Keccak-256 digest of the lowercase hex text: a digest nibble above 7
    uppercases the letter at the same position.
    """
    PREFIX = "0x"
    ADDRESS_LENGTH = 40

    @classmethod
    def to_hex_digits(cls, address: str) -> str:
        """Return the 40 lowercase hex digits of an address, without prefix"""
        if not isinstance(address, str):
            raise InvalidAddressFormat(address, "address must be a string")

        digits = address
        if digits[:2].lower() == cls.PREFIX:
            digits = digits[2:]
        digits = digits.lower()

        if len(digits) != cls.ADDRESS_LENGTH:
            raise InvalidAddressFormat(
                address,
                f"expected {cls.ADDRESS_LENGTH} hex characters, got {len(digits)}"
            )
        if not HEX_DIGITS.issuperset(digits):
            raise InvalidAddressFormat(address, "contains non-hex characters")
        return digits

    @classmethod
    def encode(cls, address: str) -> str:
        """Return the checksummed form of an address"""
        digits = cls.to_hex_digits(address)
        digest = keccak(text=digits).hex()

        checksummed = "".join(
            char.upper() if int(nibble, 16) > 7 else char
            for char, nibble in zip(digits, digest)
        )
        return cls.PREFIX + checksummed

    @classmethod
    def validate(cls, address: str) -> bool:
        """Check whether an address is already correctly checksummed"""
        # encode() ignores input case, so all-lowercase input only passes
        # when its checksum happens to contain no uppercase letters.
        return cls.encode(address) == address
