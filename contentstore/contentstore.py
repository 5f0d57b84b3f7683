"""Module for ContentStore class."""

import logging
import os
import re
from pathlib import Path
from tempfile import NamedTemporaryFile
import attr

from .config import Config, default_config, read_config, write_config
from .digest import BLOCK_SIZE, ObjectDigest, hash_bytes, hash_stream, iter_readable
from .errors import ConfigError, StoreInvalid, StoreMissing

logger = logging.getLogger(__name__)

CONFIG_NAME = 'config'
OBJECTS_NAME = 'objects'
SHARD_WIDTH = 2
TMP_PREFIX = '.tmp'
FILE_MODE = 0o644

_HEX = re.compile('[0-9a-f]+')


def object_location(hexdigest):
    """Split `hexdigest` into the shard directory and the filename within it.

    The two parts always concatenate back to `hexdigest`.

    Raises:
        ValueError: If `hexdigest` is too short to have a shard.
    """
    if len(hexdigest) < SHARD_WIDTH:
        raise ValueError('Invalid digest: "{0}" is shorter than {1} '
                         'characters'.format(hexdigest, SHARD_WIDTH))
    return hexdigest[:SHARD_WIDTH], hexdigest[SHARD_WIDTH:]


def unshard(path):
    """Recover the hex digest from an object's path."""
    path = Path(path)
    return path.parent.name + path.name


def is_valid(path):
    """Check that a store exists at `path` and has everything it needs.

    Stored objects are not rehashed, see :meth:`ContentStore.corrupted`.

    Returns:
        True

    Raises:
        StoreMissing: If `path` is not a directory.
        StoreInvalid: If the config file or objects directory is missing.
    """
    root = Path(path)
    if not root.is_dir():
        raise StoreMissing(root)
    if not (root / CONFIG_NAME).is_file():
        raise StoreInvalid(root, CONFIG_NAME)
    for subdir in (OBJECTS_NAME,):
        if not (root / subdir).is_dir():
            raise StoreInvalid(root, subdir)
    return True


def _is_hexdigest(text):
    return len(text) > SHARD_WIDTH and _HEX.fullmatch(text) is not None


def _discard(name):
    try:
        os.unlink(name)
    except FileNotFoundError:
        pass


def _read_blocks(handle, block_size):
    with handle:
        yield
        yield from iter_readable(handle, block_size)


@attr.s(auto_attribs=True, frozen=True)
class ContentStore():
    """Content addressable object store.

    Objects live at ``<root>/objects/<shard>/<rest>`` where ``shard`` is the
    first two hex characters of the object's digest. The directory tree is
    the only index.

    Use :meth:`create` or :meth:`open` rather than building one directly.

    Attributes:
        root (Path): Canonical absolute path of the store directory.
        config (Config): Settings loaded when the store was opened.
    """
    root: Path = attr.ib(converter=Path)
    config: Config = attr.ib(validator=attr.validators.instance_of(Config))

    @classmethod
    def create(cls, path):
        """Create a store at `path` and open it.

        Missing parent directories are created. An existing config is reset
        to :func:`default_config`; objects already stored are kept.

        Returns:
            ContentStore, or None if the new store could not be opened.
        """
        root = Path(path).resolve()
        (root / OBJECTS_NAME).mkdir(parents=True, exist_ok=True)
        write_config(root / CONFIG_NAME, default_config())
        logger.debug('created content store at %s', root)
        return cls.open(root)

    @classmethod
    def open(cls, path):
        """Open the existing store at `path`.

        Only the directory and its config file are required here, the
        objects directory is not checked. Use :func:`is_valid` for the full
        check.

        Returns:
            ContentStore, or None if there is no readable store at `path`.
        """
        root = Path(path).resolve()
        config_path = root / CONFIG_NAME
        if not (root.is_dir() and config_path.is_file()):
            logger.debug('no content store at %s', root)
            return None
        try:
            config = read_config(config_path)
        except ConfigError as e:
            logger.warning('cannot open content store at %s: %s', root, e)
            return None
        return cls(root, config)

    @property
    def algorithm(self):
        return self.config.algorithm

    @property
    def objects_root(self):
        return self.root / OBJECTS_NAME

    def object_path(self, hexdigest):
        shard, filename = object_location(hexdigest)
        return self.objects_root / shard / filename

    def _locate(self, hexdigest):
        if isinstance(hexdigest, ObjectDigest):
            hexdigest = hexdigest.hex()
        if not _is_hexdigest(hexdigest):
            return None
        return self.object_path(hexdigest)

    def _mktemp(self):
        """Create a temporary file inside the objects directory so it can be
        renamed into its shard.
        """
        try:
            tmp = NamedTemporaryFile(delete=False, dir=self.objects_root, prefix=TMP_PREFIX)
        except FileNotFoundError:
            os.makedirs(self.objects_root, exist_ok=True)
            tmp = NamedTemporaryFile(delete=False, dir=self.objects_root, prefix=TMP_PREFIX)
        os.chmod(tmp.name, FILE_MODE)
        return tmp

    def _mvtemp(self, tmpname, digest):
        shard, filename = object_location(digest.hex())
        shard_path = self.objects_root / shard
        shard_path.mkdir(parents=True, exist_ok=True)
        os.replace(tmpname, shard_path / filename)

    def store(self, data):
        """Store `data` and return its :class:`ObjectDigest`.

        An object already at the destination is replaced, with identical
        content since the location is derived from the content.

        Returns:
            ObjectDigest, or None if the store's algorithm cannot hash.
        """
        digest = hash_bytes(self.algorithm, data)
        if digest is None:
            return None
        tmp = self._mktemp()
        try:
            with tmp:
                tmp.write(data)
            self._mvtemp(tmp.name, digest)
        except BaseException:
            _discard(tmp.name)
            raise
        logger.debug('stored %s (%d bytes)', digest, len(data))
        return digest

    def store_stream(self, chunks, block_size=BLOCK_SIZE):
        """Like :meth:`store`, but consumes `chunks` incrementally.

        Args:
            chunks: Iterable of bytes, or a binary file object which is read
                `block_size` bytes at a time.
        """
        if hasattr(chunks, 'read'):
            chunks = iter_readable(chunks, block_size)
        tmp = self._mktemp()
        try:
            with tmp:
                digest = hash_stream(self.algorithm, chunks, sink=tmp)
            if digest is None:
                _discard(tmp.name)
                return None
            self._mvtemp(tmp.name, digest)
        except BaseException:
            _discard(tmp.name)
            raise
        logger.debug('stored %s from stream', digest)
        return digest

    def fetch(self, hexdigest):
        """Return the content stored under `hexdigest`, or None if there is
        no such object. The content is not rehashed.
        """
        path = self._locate(hexdigest)
        if path is None or not path.is_file():
            logger.debug('object %s not found', hexdigest)
            return None
        return path.read_bytes()

    def fetch_stream(self, hexdigest, block_size=BLOCK_SIZE):
        """Like :meth:`fetch`, but return a generator of chunks.

        The object file is opened before this returns, so the stream stays
        readable even if the object is removed afterwards. Closing the
        generator, or dropping it, closes the file.
        """
        path = self._locate(hexdigest)
        if path is None or not path.is_file():
            logger.debug('object %s not found', hexdigest)
            return None
        try:
            handle = open(path, 'rb')
        except FileNotFoundError:
            logger.debug('object %s removed before it was opened', hexdigest)
            return None
        chunks = _read_blocks(handle, block_size)
        next(chunks)
        return chunks

    def exists(self, hexdigest):
        path = self._locate(hexdigest)
        return path is not None and path.is_file()

    def digests(self):
        """Yield the hex digest of every stored object."""
        if not self.objects_root.is_dir():
            return
        for shard in sorted(self.objects_root.iterdir()):
            if len(shard.name) != SHARD_WIDTH or not _HEX.fullmatch(shard.name):
                continue
            if not shard.is_dir():
                continue
            for path in sorted(shard.iterdir()):
                if path.is_file() and _HEX.fullmatch(path.name):
                    yield unshard(path)

    def corrupted(self):
        """Yield ``(path, hexdigest)`` for every object whose content no
        longer hashes to its location, where ``hexdigest`` is the digest of
        what is actually on disk.
        """
        for hexdigest in self.digests():
            path = self.object_path(hexdigest)
            with open(path, 'rb') as handle:
                actual = hash_stream(self.algorithm, iter_readable(handle))
            if actual is not None and actual.hex() != hexdigest:
                yield (path, actual.hex())

    def __contains__(self, hexdigest):
        return self.exists(hexdigest)

    def __iter__(self):
        return self.digests()
