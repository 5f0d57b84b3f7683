"""Object digests.

Hashing here is pure: nothing in this module touches the filesystem except
through the optional ``sink`` handed to :func:`hash_stream`.
"""

import enum
import hashlib
import logging
import attr

logger = logging.getLogger(__name__)

BLOCK_SIZE = 256 * 128 * 2


class HashAlgorithm(enum.Enum):
    """Digest algorithms a store can be configured with.

    The value is the name written to the store's config document.
    """
    SHA256 = 'sha256'
    SHA512 = 'sha512'

    @property
    def digest_size(self):
        return digest_size(self)

    @property
    def hexdigest_length(self):
        return digest_size(self) * 2


_CONSTRUCTORS = {
    HashAlgorithm.SHA256: hashlib.sha256,
    HashAlgorithm.SHA512: hashlib.sha512,
}


def _lookup(algorithm):
    """Return the :class:`HashAlgorithm` for `algorithm`, or ``None``."""
    if isinstance(algorithm, HashAlgorithm):
        return algorithm if algorithm in _CONSTRUCTORS else None
    try:
        algorithm = HashAlgorithm(algorithm)
    except ValueError:
        return None
    return algorithm if algorithm in _CONSTRUCTORS else None


def _new_hasher(algorithm):
    return _CONSTRUCTORS[algorithm]()


def _to_bytes(value):
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise TypeError('digest must be bytes-like, got {0}'.format(type(value).__name__))
    return bytes(value)


def digest_size(algorithm):
    """Size in bytes of a raw digest under `algorithm`."""
    known = _lookup(algorithm)
    if known is None:
        raise ValueError('Unsupported hash algorithm: {0!r}'.format(algorithm))
    return _new_hasher(known).digest_size


@attr.s(auto_attribs=True, frozen=True)
class ObjectDigest():
    """Digest of an object's content.

    Attributes:
        algorithm (HashAlgorithm): Algorithm the digest was computed with.
        raw (bytes): Raw digest bytes. Length always matches the algorithm.
    """
    algorithm: HashAlgorithm = attr.ib(validator=attr.validators.instance_of(HashAlgorithm))
    raw: bytes = attr.ib(converter=_to_bytes)

    @raw.validator
    def _check_raw(self, attribute, value):
        expected = digest_size(self.algorithm)
        if len(value) != expected:
            raise ValueError('{0} digest must be {1} bytes, got {2}'.format(
                self.algorithm.value, expected, len(value)))

    @classmethod
    def from_hex(cls, algorithm, hexdigest):
        """Parse lowercase or uppercase hex text into a digest.

        Raises:
            ValueError: If `hexdigest` is not hex or is the wrong length for
                `algorithm`.
        """
        known = _lookup(algorithm)
        if known is None:
            raise ValueError('Unsupported hash algorithm: {0!r}'.format(algorithm))
        try:
            raw = bytes.fromhex(hexdigest)
        except ValueError:
            raise ValueError('Invalid digest: "{0}" is not hex'.format(hexdigest))
        return cls(known, raw)

    def hex(self):
        return self.raw.hex()

    def __str__(self):
        return self.hex()


def hash_bytes(algorithm, data):
    """Return the :class:`ObjectDigest` of `data`, or ``None`` if `algorithm`
    is not supported.
    """
    known = _lookup(algorithm)
    if known is None:
        logger.warning('cannot hash with unsupported algorithm %r', algorithm)
        return None
    hasher = _new_hasher(known)
    hasher.update(data)
    return ObjectDigest(known, hasher.digest())


def hash_stream(algorithm, chunks, sink=None):
    """Hash an iterable of byte chunks without materializing it.

    The result is identical to :func:`hash_bytes` over the concatenation of
    `chunks`. If `sink` is given every chunk is also written to it, in order.
    An unsupported `algorithm` returns ``None`` and `chunks` is left unread.
    """
    known = _lookup(algorithm)
    if known is None:
        logger.warning('cannot hash with unsupported algorithm %r', algorithm)
        return None
    hasher = _new_hasher(known)
    for chunk in chunks:
        hasher.update(chunk)
        if sink is not None:
            sink.write(chunk)
    return ObjectDigest(known, hasher.digest())


def iter_readable(handle, block_size=BLOCK_SIZE):
    """Yield `block_size` chunks from a binary file object until EOF."""
    return iter(lambda: handle.read(block_size), b'')
