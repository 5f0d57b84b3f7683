# -*- coding: utf-8 -*-
"""contentstore is a content-addressable object store.

Objects are saved in a directory tree under a path derived from the hash of
their content, and fetched back by that hash.

Typical use cases for this kind of system are ones where:

- Objects are written once and never change.
- It's desirable to have no duplicate objects.
- Object metadata, such as names, is stored elsewhere (e.g. in a database)
  that refers to objects by digest.
"""

from .__meta__ import (
    __title__,
    __summary__,
    __url__,
    __version__,
    __author__,
    __email__,
    __license__
)

from .config import Config, default_config, read_config, write_config
from .contentstore import ContentStore, is_valid, object_location, unshard
from .digest import HashAlgorithm, ObjectDigest, hash_bytes, hash_stream
from .errors import ConfigError, ContentStoreError, StoreInvalid, StoreMissing


__all__ = ('ContentStore', 'is_valid', 'object_location', 'unshard',
           'Config', 'default_config', 'read_config', 'write_config',
           'HashAlgorithm', 'ObjectDigest', 'hash_bytes', 'hash_stream',
           'ContentStoreError', 'StoreMissing', 'StoreInvalid', 'ConfigError')
