"""
Argosy commands.

Command
- A user-invokable unit bound to one handler method (`attribute`, immutable
  once created). It owns a ParameterCollection and an OptionCollection. The
  display name defaults to the method name without its "_command"/"Command"
  suffix, hyphenated ("deploy_now_command" -> "deploy-now").

CommandCollection
- Commands keyed by handler method; display names are unique and indexed
  for lookups by what the user types.
"""
import copy

from .collection import Collection
from .entity import Entity
from .faults import ConfigurationError, FaultCode
from .options import OptionCollection
from .parameters import ParameterCollection
from .utils import Unset, coalesce, hyphenate

SUFFIXES = ("_command", "Command")


def command_name(method, /, suffix="_command"):
    """
    Display name for a handler method: "deploy_now_command" -> "deploy-now".
    """
    for candidate in dict.fromkeys((suffix, *SUFFIXES)):
        if method.endswith(candidate) and method != candidate:
            method = method[:-len(candidate)]
            break
    return hyphenate(method)


class Command(Entity):
    __introspectable__ = ("name", "help", "attribute", "params", "options")

    def __init__(self, method, /, *, name=Unset, help=Unset, params=(), options=()):
        if not isinstance(method, str) or not method:
            raise ConfigurationError("command handler method cannot be empty", code=FaultCode.MISSING_METHOD)
        super().__init__(coalesce(name, command_name(method)), help=help, attribute=method)
        self._params = ParameterCollection()
        self._options = OptionCollection()
        if params:
            self._params.merge_definition_list(params)
        if options:
            self._options.add_list(options)

    @classmethod
    def from_definition(cls, definition, /):
        definition = dict(definition)
        try:
            method = definition.pop("method")
        except KeyError:
            raise ConfigurationError("command definition is missing its handler method", code=FaultCode.MISSING_METHOD) from None
        definition.pop("attribute", None)
        return cls(method, **definition)

    @classmethod
    def from_signature(cls, method, positionals, keywords, /, **definition):
        """
        Build a command whose parameters and options mirror a handler signature.
        """
        self = cls(method, **definition)
        self._params.add_from_signature(positionals)
        self._options.add_from_signature(keywords)
        return self

    @property
    def method(self):
        return self._attribute

    def _merge_attribute(self, attribute):
        if attribute != self._attribute:
            raise ConfigurationError(
                f"command {self._name!r} is bound to {self._attribute!r} and cannot be rebound to {attribute!r}",
                code=FaultCode.ATTRIBUTE_RENAME,
                data={"command": self._name, "method": attribute},
            )

    _merge_method = _merge_attribute

    def _merge_params(self, params):
        self._params.merge_definition_list(params)

    def _merge_options(self, options):
        self._options.add_list(options)

    def to_definition(self):
        return {
            "method": self._attribute,
            "name": self._name,
            "help": self._help,
            "params": self._params.to_definition(),
            "options": self._options.to_definition(),
        }


class CommandCollection(Collection[Command]):
    __typename__ = "command-collection"

    def _reset(self):
        self._names = {}

    def validate(self, key, item, /):
        if (owner := self._names.get(item.name, key)) != key:
            raise ConfigurationError(
                f"command name {item.name!r} is already used by the handler {owner!r}",
                code=FaultCode.DUPLICATE_COMMAND,
                data=item.name,
            )
        return True

    def on_added(self, key, item, /):
        for name in [name for name, owner in self._names.items() if owner == key]:
            del self._names[name]
        self._names[item.name] = key

    def add(self, definition, /, update_if_exists=True):
        """
        Insert a command, or merge a definition into the command bound to the same method.
        """
        if isinstance(definition, Command):
            return self.append(definition.method, definition)
        if (method := definition.get("method")) is None:
            raise ConfigurationError("command definition is missing its handler method", code=FaultCode.MISSING_METHOD)
        if (command := self.get(method)) is None:
            return self.append(method, Command.from_definition(definition))
        if not update_if_exists:
            raise ConfigurationError(
                f"{self.__typename__} already contains {method!r}",
                code=FaultCode.DUPLICATE_KEY,
                data=method,
            )
        return self.update(method, copy.deepcopy(command).merge(definition))

    def add_list(self, definitions, /, update_if_exists=True):
        with self.transaction():
            for definition in definitions:
                self.add(definition, update_if_exists)
        return self

    def get_by_display_name(self, name, /):
        return self.find(name, "name")

    def has_bound_property(self, method, /):
        return method in self

    def verify(self):
        super().verify()
        for command in self:
            command.params.verify()
            command.options.verify()
        return self

    def to_definition(self):
        return [command.to_definition() for command in self]


__all__ = (
    "Command",
    "CommandCollection",
    "command_name",
)
