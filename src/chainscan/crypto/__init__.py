from .checksum import ChecksumCodec

__all__ = ['ChecksumCodec']
