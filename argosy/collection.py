"""
Argosy ordered, key-unique collections.

Collection[T] is the structural backbone of the parameter, option and command
collections. Every insertion passes through two hooks:

- validate(key, item): raise ConfigurationError for hard failures, or return
  False to skip the insertion silently.
- on_added(key, item): bookkeeping after a successful insertion (secondary
  indexes such as name or alias maps).

Subclasses keep their bookkeeping in state cleared by _reset(), which lets
verify() replay validation over the current items from scratch. Multi-step
changes run inside transaction(): on failure the items and the bookkeeping
are restored as they were.
"""
import copy
from contextlib import contextmanager
from enum import Enum

from .faults import ConfigurationError, FaultCode


class Collection[T]:
    __typename__ = "collection"

    def __init__(self):
        self._items = {}
        self._reset()

    def _reset(self):
        """
        Clear secondary bookkeeping (subclass hook).
        """

    def validate(self, key, item, /):
        return True

    def on_added(self, key, item, /):
        pass

    def _check_key(self, key):
        if not isinstance(key, str | Enum):
            raise ConfigurationError(
                f"{self.__typename__} key must be a string or an enum member, not {type(key).__name__}",
                code=FaultCode.INVALID_KEY,
                data=key,
            )
        if isinstance(key, str) and not key:
            raise ConfigurationError(f"{self.__typename__} key cannot be empty", code=FaultCode.INVALID_KEY)

    def append(self, key, item, /):
        """
        Insert a new item; fails if the key is invalid or already present.

        Returns True when the item was inserted, False when validate() declined it.
        """
        self._check_key(key)
        if key in self._items:
            raise ConfigurationError(
                f"{self.__typename__} already contains {key!r}",
                code=FaultCode.DUPLICATE_KEY,
                data=key,
            )
        if self.validate(key, item) is False:
            return False
        self._items[key] = item
        self.on_added(key, item)
        return True

    def update(self, key, item, /):
        """
        Replace an existing item; fails if the key is invalid or missing.
        """
        self._check_key(key)
        if key not in self._items:
            raise ConfigurationError(
                f"{self.__typename__} does not contain {key!r}",
                code=FaultCode.MISSING_KEY,
                data=key,
            )
        if self.validate(key, item) is False:
            return False
        self._items[key] = item
        self.on_added(key, item)
        return True

    def get(self, key, default=None, /):
        return self._items.get(key, default)

    def find(self, value, attribute=None, /):
        """
        Return the first item equal to `value`, or whose `attribute` equals it.
        """
        for item in self._items.values():
            if attribute is None:
                if item == value:
                    return item
            elif getattr(item, attribute, None) == value:
                return item
        return None

    def keys(self):
        return list(self._items)

    def clear(self):
        self._items.clear()
        self._reset()

    @contextmanager
    def transaction(self):
        """
        Snapshot the collection state and restore it if the block raises.

        Items themselves are not copied: change copies of them and store the
        copies inside the block.
        """
        state = {name: copy.copy(value) for name, value in vars(self).items()}
        try:
            yield self
        except BaseException:
            vars(self).clear()
            vars(self).update(state)
            raise

    def verify(self):
        """
        Replay validation over every item, as if the collection was rebuilt.
        """
        with self.transaction():
            items = list(self._items.items())
            self._items.clear()
            self._reset()
            for key, item in items:
                self.append(key, item)
        return self

    def __len__(self):
        return len(self._items)

    def __iter__(self):
        return iter(list(self._items.values()))

    def __contains__(self, key):
        return key in self._items

    def __repr__(self):
        return f"{self.__typename__}({list(self._items.values())!r})"


__all__ = (
    "Collection",
)
