"""
Argosy named options.

Option
- A flag-style argument (`--name`, `-n`). Names and aliases are stored without
  their leading dashes; aliases are deduplicated (first occurrence wins) and an
  alias equal to the option's own name is dropped.

OptionCollection
- Options keyed by name. Every name and alias lives in one flat namespace
  across the whole collection, and bound attributes are unique.
"""
import copy

from .collection import Collection
from .entity import Entity
from .faults import ConfigurationError, FaultCode
from .parameters import PARAMS_SENTINEL, OPTIONS_SENTINEL, _sanitize_choices, _definition_name
from .utils import Unset, hyphenate


def _strip(token):
    return token.lstrip("-")


def _sanitize_aliases(cls, name, aliases, /):
    """
    Internal: dash-free, unique aliases without the option's own name.
    """
    if isinstance(aliases, str):
        aliases = [aliases]
    unique = []
    for alias in aliases:
        if not isinstance(alias, str):
            raise TypeError(f"{cls.__typename__}() aliases must only contain strings")
        if (alias := _strip(alias.strip())) and alias != name and alias not in unique:
            unique.append(alias)
    return unique


class Option(Entity):
    __introspectable__ = ("name", "help", "attribute", "aliases", "accept_only", "default")

    def __init__(self, name, /, *, help=Unset, attribute=Unset, aliases=(), accept_only=(), default=None):
        if isinstance(name, str):
            name = _strip(name)
        super().__init__(name, help=help, attribute=attribute)
        self._aliases = _sanitize_aliases(type(self), self._name, aliases)
        self._accept_only = _sanitize_choices(type(self), accept_only)
        self._default = default

    @classmethod
    def from_definition(cls, definition, /):
        definition = dict(definition)
        return cls(_definition_name(cls, definition), **{k: v for k, v in definition.items() if k != "name"})

    @property
    def tokens(self):
        """
        Every name this option answers to, its own name first.
        """
        return [self._name, *self._aliases]

    def _merge_name(self, name):
        super()._merge_name(_strip(name))
        self._aliases = [alias for alias in self._aliases if alias != self._name]

    def _merge_aliases(self, aliases):
        self._aliases = _sanitize_aliases(type(self), self._name, [*self._aliases, *aliases])

    def _merge_accept_only(self, choices):
        self._accept_only = _sanitize_choices(type(self), choices)

    def _merge_default(self, default):
        self._default = default


class OptionCollection(Collection[Option]):
    __typename__ = "option-collection"

    def _reset(self):
        self._owners = {}

    def validate(self, key, item, /):
        for token in item.tokens:
            if (owner := self._owners.get(token, key)) != key:
                raise ConfigurationError(
                    f"option name {token!r} of {item.name!r} is already used by option {owner!r}",
                    code=FaultCode.ALIAS_COLLISION,
                    data=token,
                )
        for name, option in self._items.items():
            if name != key and option.attribute == item.attribute:
                raise ConfigurationError(
                    f"options {option.name!r} and {item.name!r} are bound to the same attribute {item.attribute!r}",
                    code=FaultCode.DUPLICATE_ATTRIBUTE,
                    data=item.attribute,
                )
        return True

    def on_added(self, key, item, /):
        for token in item.tokens:
            self._owners[token] = key

    def owner(self, token, /):
        """
        The option answering to `token` (name or alias), if any.
        """
        if (key := self._owners.get(_strip(token))) is None:
            return None
        return self._items[key]

    def add(self, definition, /):
        """
        Insert a new option, or merge into the existing one with the same name.
        """
        if isinstance(definition, Option):
            return self.append(definition.name, definition)
        name = _strip(_definition_name(Option, definition))
        if (option := self.get(name)) is None:
            return self.append(name, Option.from_definition(definition))
        return self.update(name, copy.deepcopy(option).merge(definition))

    def add_list(self, definitions, /):
        with self.transaction():
            for definition in definitions:
                self.add(definition)
        return self

    def add_from_signature(self, names, /):
        """
        Seed options from keyword-only handler arguments ("dry_run" -> --dry-run).
        """
        for name in names:
            if name in (PARAMS_SENTINEL, OPTIONS_SENTINEL):
                continue
            self.add(Option(hyphenate(name), attribute=name))
        return self

    def to_definition(self):
        return [option.to_definition() for option in self]


__all__ = (
    "Option",
    "OptionCollection",
)
