"""
Argosy positional parameters.

Parameter
- A positional (non-flag) argument definition: `kind` (SINGLE takes one token,
  LIST takes every remaining token), `required`, `accept_only` (case-insensitive
  whitelist, empty = unrestricted), `default` and `index` (slot in the handler
  signature, -1 when not derived from one).

ParameterCollection
- Ordered definitions keyed by hyphenated name. Every insert is validated in
  this order: unique bound attribute, no required parameter after an optional
  one, at most one LIST parameter and nothing after it.
- add_from_signature() seeds the collection from handler parameter names; the
  sentinel names "params" and "options" only record their slot index.
- merge_definition() merges by name, merge_definition_list() by position.
"""
import copy
from enum import StrEnum

from .collection import Collection
from .entity import Entity
from .faults import ConfigurationError, FaultCode
from .utils import Unset, hyphenate

PARAMS_SENTINEL = "params"
OPTIONS_SENTINEL = "options"


class ParameterKind(StrEnum):
    SINGLE = "single"
    LIST = "list"


def _sanitize_choices(cls, choices, /):
    """
    Internal: accepted values are unique strings; first occurrence wins.
    """
    if isinstance(choices, str):
        raise TypeError(f"{cls.__typename__}() accept_only must be an iterable of strings, not a string")
    unique = []
    for choice in choices:
        if not isinstance(choice, str):
            raise TypeError(f"{cls.__typename__}() accept_only must only contain strings")
        if choice not in unique:
            unique.append(choice)
    return unique


def _definition_name(cls, definition, /):
    try:
        return definition["name"]
    except KeyError:
        raise ConfigurationError(f"{cls.__typename__} definition is missing a name", code=FaultCode.EMPTY_NAME) from None


class Parameter(Entity):
    __introspectable__ = ("name", "help", "attribute", "kind", "required", "accept_only", "default", "index")

    def __init__(
            self,
            name,
            /,
            *,
            help=Unset,
            attribute=Unset,
            kind=ParameterKind.SINGLE,
            required=False,
            accept_only=(),
            default=None,
            index=-1,
    ):
        super().__init__(name, help=help, attribute=attribute)
        self._name = hyphenate(self._name) or self._name
        self._kind = ParameterKind(kind)
        self._required = bool(required)
        self._accept_only = _sanitize_choices(type(self), accept_only)
        self._default = default
        self._index = index

    @classmethod
    def from_definition(cls, definition, /):
        definition = dict(definition)
        return cls(_definition_name(cls, definition), **{k: v for k, v in definition.items() if k != "name"})

    @property
    def is_list(self):
        return self._kind is ParameterKind.LIST

    def _merge_name(self, name):
        super()._merge_name(name)
        self._name = hyphenate(self._name) or self._name

    def _merge_attribute(self, attribute):
        if self._index >= 0 and attribute != self._attribute:
            raise ConfigurationError(
                f"parameter {self._name!r} is bound to the handler argument {self._attribute!r} and cannot be renamed",
                code=FaultCode.ATTRIBUTE_RENAME,
                data={"parameter": self._name, "attribute": attribute},
            )
        super()._merge_attribute(attribute)

    def _merge_kind(self, kind):
        self._kind = ParameterKind(kind)

    def _merge_required(self, required):
        self._required = bool(required)

    def _merge_accept_only(self, choices):
        self._accept_only = _sanitize_choices(type(self), choices)

    def _merge_default(self, default):
        self._default = default

    def _merge_index(self, index):
        self._index = index


class ParameterCollection(Collection[Parameter]):
    __typename__ = "parameter-collection"

    def __init__(self):
        super().__init__()
        self.params_index = -1
        self.options_index = -1
        self._merging = False

    def validate(self, key, item, /):
        others = [parameter for name, parameter in self._items.items() if name != key]

        for parameter in others:
            if parameter.attribute == item.attribute:
                raise ConfigurationError(
                    f"parameters {parameter.name!r} and {item.name!r} are bound to the same attribute {item.attribute!r}",
                    code=FaultCode.DUPLICATE_ATTRIBUTE,
                    data=item.attribute,
                )

        if key in self._items:
            # in-place updates are checked for ordering by verify()
            return True

        if item.required and not self._merging and any(not parameter.required for parameter in others):
            raise ConfigurationError(
                f"required parameter {item.name!r} cannot follow an optional parameter",
                code=FaultCode.REQUIRED_AFTER_OPTIONAL,
                data=item.name,
            )

        if (tail := next((parameter for parameter in others if parameter.is_list), None)) is not None:
            if item.is_list:
                raise ConfigurationError(
                    f"parameter {item.name!r} cannot be a list, {tail.name!r} already takes every remaining value",
                    code=FaultCode.MULTIPLE_LISTS,
                    data=item.name,
                )
            raise ConfigurationError(
                f"parameter {item.name!r} cannot follow the list parameter {tail.name!r}",
                code=FaultCode.PARAMETER_AFTER_LIST,
                data=item.name,
            )
        return True

    def add(self, parameter, /):
        return self.append(parameter.name, parameter)

    def add_from_signature(self, names, /):
        """
        Derive one parameter per handler argument name.

        A leading "*" (or "...") marks a LIST parameter; the sentinel names
        "params" and "options" are skipped and their index recorded.
        """
        for index, name in enumerate(names):
            kind = ParameterKind.SINGLE
            if name.startswith(("*", "...")):
                name = name.lstrip("*.")
                kind = ParameterKind.LIST
            if name == PARAMS_SENTINEL:
                self.params_index = index
                continue
            if name == OPTIONS_SENTINEL:
                self.options_index = index
                continue
            self.add(Parameter(name, attribute=name, kind=kind, index=index))
        return self

    def merge_definition(self, definition, /):
        """
        Merge into the parameter with the same (hyphenated) name, or append a new one.
        """
        name = hyphenate(_definition_name(Parameter, definition))
        if (parameter := self.get(name)) is None:
            return self.add(Parameter.from_definition(definition))
        parameter = copy.deepcopy(parameter).merge(definition)
        return self.update(parameter.name, parameter)

    def merge_definition_list(self, definitions, /):
        """
        Merge definitions index by index against the existing parameters.

        Shorter lists leave the trailing parameters untouched, longer lists append.
        Merged positions keep their place even if they become required after an
        optional one (verify() checks that); appended ones are validated as usual.
        The collection is left unchanged when any definition is rejected.
        """
        existing = list(self._items.values())
        merged = []
        for index, definition in enumerate(definitions):
            if index < len(existing):
                merged.append(copy.deepcopy(existing[index]).merge(definition))
            else:
                merged.append(Parameter.from_definition(definition))
        merged.extend(existing[len(merged):])

        with self.transaction():
            self._items.clear()
            self._reset()
            try:
                for index, parameter in enumerate(merged):
                    self._merging = index < len(existing)
                    self.add(parameter)
            finally:
                self._merging = False
        return self

    def contains_required(self):
        return any(parameter.required for parameter in self)

    def to_definition(self):
        return [parameter.to_definition() for parameter in self]


__all__ = (
    "ParameterKind",
    "Parameter",
    "ParameterCollection",
)
