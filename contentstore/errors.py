"""Exceptions raised by contentstore.

Absence of an object is never an exception, fetch and store return ``None``.
Filesystem faults are left as the builtin ``OSError`` family.
"""


class ContentStoreError(Exception):
    """Base class for all contentstore errors."""


class StoreMissing(ContentStoreError):
    """The store root directory does not exist."""

    def __init__(self, path):
        self.path = path
        super().__init__('No content store at: {0}'.format(path))


class StoreInvalid(ContentStoreError):
    """The store root exists but a required member is missing.

    Attributes:
        path: Store root that was checked.
        component (str): Name of the missing member, ``'config'`` or
            ``'objects'``.
    """

    def __init__(self, path, component):
        self.path = path
        self.component = component
        super().__init__('Invalid content store {0}: missing {1}'.format(path, component))


class ConfigError(ContentStoreError, ValueError):
    """The config document could not be decoded."""
