"""Store-wide settings and their on-disk document.

The config file is a small JSON object::

    {"hash-algorithm": "sha256"}
"""

import json
import attr

from .digest import HashAlgorithm
from .errors import ConfigError

ALGORITHM_KEY = 'hash-algorithm'


@attr.s(auto_attribs=True, frozen=True)
class Config():
    """Settings shared by every operation on one store.

    Attributes:
        algorithm (HashAlgorithm): Digest algorithm used to address objects.
            Fixed for the life of a store; objects written under another
            algorithm would no longer be found.
    """
    algorithm: HashAlgorithm = attr.ib(default=HashAlgorithm.SHA256,
                                       converter=HashAlgorithm)

    def to_document(self):
        return {ALGORITHM_KEY: self.algorithm.value}

    @classmethod
    def from_document(cls, document):
        if not isinstance(document, dict):
            raise ConfigError('config document must be an object, got {0}'.format(
                type(document).__name__))
        try:
            name = document[ALGORITHM_KEY]
        except KeyError:
            raise ConfigError('config document is missing "{0}"'.format(ALGORITHM_KEY))
        try:
            return cls(algorithm=name)
        except ValueError:
            raise ConfigError('unknown hash algorithm in config: {0!r}'.format(name))


def default_config():
    return Config()


def read_config(path):
    """Load the :class:`Config` stored at `path`.

    Raises:
        ConfigError: If the document is malformed.
        OSError: If `path` cannot be read.
    """
    with open(path, 'rb') as handle:
        content = handle.read()
    try:
        document = json.loads(content.decode('utf-8'))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigError('cannot parse config {0}: {1}'.format(path, e))
    return Config.from_document(document)


def write_config(path, config):
    """Write `config` to `path`, replacing any existing file."""
    with open(path, 'w', encoding='utf-8') as handle:
        json.dump(config.to_document(), handle, indent=4, sort_keys=True)
        handle.write('\n')
