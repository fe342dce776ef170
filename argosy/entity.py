"""
Argosy configuration entities: the common base of parameters, options and commands.

An entity has a user-facing `name`, an optional `help` text and a bound
`attribute` (the identifier under which a parsed value reaches application
code). Entities are built from keyword metadata and later refined through
merge(definition), where every field has its own merge function
(`_merge_<field>`): a merge may only add detail, never erase it.
"""
import functools
import operator
import re

from .faults import ConfigurationError, FaultCode
from .utils import Unset, coalesce, mirror, rename, identifier


class EntityType(type):
    """
    Metaclass wiring introspection for entity classes.

    - __typename__ is derived from the class name (camel-case split with hyphens).
    - Every name listed in __introspectable__ becomes a read-only mirror() property.
    - __repr__/__rich_repr__ walk __introspectable__.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_name(cls, name, /):
    """
    Internal: entity names must be non-empty strings.
    """
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__}() name must be a string")
    if not name.strip():
        raise ConfigurationError(f"{cls.__typename__} name cannot be empty", code=FaultCode.EMPTY_NAME)
    return name.strip()


def _sanitize_text(cls, text, field, /):
    if not isinstance(text, str):
        raise TypeError(f"{cls.__typename__}() {field} must be a string")
    return text


class Entity(metaclass=EntityType):
    __introspectable__ = ("name", "help", "attribute")

    def __init__(self, name, /, *, help=Unset, attribute=Unset):
        cls = type(self)
        self._name = _sanitize_name(cls, name)
        self._help = _sanitize_text(cls, coalesce(help, ""), "help")
        self._attribute = _sanitize_text(cls, coalesce(attribute, identifier(self._name)), "attribute")

    def merge(self, definition, /):
        """
        Merge a definition mapping into this entity, field by field.

        Keys map to `_merge_<key>` functions; unknown keys raise TypeError.
        Empty values (None, "", empty containers) are ignored.
        """
        for key, value in definition.items():
            if (merger := getattr(self, f"_merge_{key}", None)) is None:
                raise TypeError(f"{type(self).__typename__} definition got an unexpected key {key!r}")
            if value is None or value is Unset or (not isinstance(value, bool) and not value and value != 0):
                continue
            merger(value)
        return self

    def _merge_name(self, name):
        self._name = _sanitize_name(type(self), name)

    def _merge_help(self, help):
        self._help = _sanitize_text(type(self), help, "help")

    def _merge_attribute(self, attribute):
        self._attribute = _sanitize_text(type(self), attribute, "attribute")

    def to_definition(self):
        """
        Plain-dict snapshot of this entity, suitable for merge() or construction.
        """
        return dict(self.__rich_repr__())


__all__ = (
    "Entity",
)
