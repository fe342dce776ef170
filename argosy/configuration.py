"""
Argosy program configuration.

ProgramConfiguration aggregates program metadata (name, help, version, binary
name, default command) with one CommandCollection, one OptionCollection and
one ParameterCollection (the latter only used in no-command mode).

inject_configuration(target) builds it once per program class by reflecting
over the class' methods and memoizes it on the class:

- command mode: every method named "<name>_command" (or marked with @command)
  becomes a command whose parameters and options mirror its signature;
- no-command mode: the main method's signature seeds the program parameters
  and options.

The class configuration changes only through merge() afterwards (@program);
__slots__ keeps its shape fixed. Program instances never share it: configure()
hands every instance a private copy, reflected again when the instance runs
under other settings, with the instance definition merged in.
"""
import copy
import inspect
import logging

from .commands import Command, CommandCollection, command_name
from .faults import ConfigurationError, FaultCode
from .options import OptionCollection
from .parameters import ParameterCollection
from .settings import Settings
from .utils import Unset, coalesce, mirror, hyphenate, separate, reflect

logger = logging.getLogger(__name__)

ATTRIBUTE = "__configuration__"


class ProgramConfiguration:
    __slots__ = ("_name", "_help", "_version", "_binary_name", "_default_command", "settings", "commands", "options", "params")

    name = mirror("name")
    help = mirror("help")
    version = mirror("version")
    binary_name = mirror("binary_name")
    default_command = mirror("default_command")

    def __init__(self, name, /, *, settings=Unset, help=Unset, version=Unset, binary_name=Unset, default_command=Unset):
        if not isinstance(name, str) or not name.strip():
            raise ConfigurationError("program name cannot be empty", code=FaultCode.EMPTY_NAME)
        self.settings = coalesce(settings, Settings())
        self._name = name
        self._help = coalesce(help, "")
        self._version = coalesce(version, "1.0.0")
        self._binary_name = coalesce(binary_name, hyphenate(name))
        self._default_command = coalesce(default_command, "")
        self.commands = CommandCollection()
        self.options = OptionCollection()
        self.params = ParameterCollection()

    def merge(self, definition, /):
        """
        Merge a program definition: scalars only when non-empty, parameters by
        position, options by name, commands by handler method.
        """
        for key, value in dict(coalesce(definition, {}) or {}).items():
            if (merger := getattr(self, f"_merge_{key}", None)) is None:
                raise TypeError(f"program definition got an unexpected key {key!r}")
            if value is None or value is Unset or (isinstance(value, str | list | tuple) and not value):
                continue
            merger(value)
        return self

    def _merge_name(self, name):
        self._name = name

    def _merge_help(self, help):
        self._help = help

    def _merge_version(self, version):
        self._version = str(version)

    def _merge_binary_name(self, binary_name):
        self._binary_name = binary_name

    def _merge_default_command(self, default_command):
        self._default_command = default_command

    def _merge_params(self, params):
        self.params.merge_definition_list(params)

    def _merge_options(self, options):
        self.options.add_list(options)

    def _merge_commands(self, commands):
        self.commands.add_list(commands)

    def verify(self):
        """
        Replay validation over the active collections once every merge is done.
        """
        if self.settings.commands_enabled:
            self.commands.verify()
        else:
            self.params.verify()
        self.options.verify()
        return self

    def copy(self):
        """
        An independent configuration: collections are deep-copied, settings shared.
        """
        clone = copy.copy(self)
        clone.commands = copy.deepcopy(self.commands)
        clone.options = copy.deepcopy(self.options)
        clone.params = copy.deepcopy(self.params)
        return clone

    def has_real_command(self):
        """
        True when a command other than the default command is configured.
        """
        return any(command.method != self._default_command for command in self.commands)

    def resolve_command(self, name, /):
        """
        Find a command by display name, then by handler method.
        """
        if not name:
            return None
        return self.commands.get_by_display_name(name) or self.commands.get(name)

    def to_definition(self):
        return {
            "name": self._name,
            "help": self._help,
            "version": self._version,
            "binary_name": self._binary_name,
            "default_command": self._default_command,
            "params": self.params.to_definition(),
            "options": self.options.to_definition(),
            "commands": self.commands.to_definition(),
        }

    def __repr__(self):
        return f"program-configuration(name={self._name!r}, commands={len(self.commands)}, options={len(self.options)}, params={len(self.params)})"


def _members(cls):
    """
    Methods visible on a program class, excluding the framework base classes.
    """
    members = {}
    for klass in reversed(cls.__mro__):
        if klass is object or klass.__dict__.get("__framework__", False):
            continue
        for name, member in vars(klass).items():
            if inspect.isfunction(member) or isinstance(member, staticmethod | classmethod):
                members[name] = member
    return members


def _signature(member):
    """
    Positional and keyword-only argument names as seen through an instance.
    """
    if isinstance(member, staticmethod):
        return reflect(member.__func__)
    positionals, keywords = reflect(member.__func__ if isinstance(member, classmethod) else member)
    if positionals and not positionals[0].startswith("*"):
        del positionals[0]
    return positionals, keywords


def _function(member):
    return member.__func__ if isinstance(member, staticmethod | classmethod) else member


def build_configuration(cls, settings=Unset, /):
    """
    Reflect a fresh configuration out of a program class (never memoized).
    """
    if cls.__module__ == "builtins":
        raise ConfigurationError(
            f"cannot configure a program from the untyped {cls.__name__!r} object",
            code=FaultCode.UNTYPED_TARGET,
            data=cls.__name__,
        )
    settings = coalesce(settings, getattr(cls, "settings", None))
    if not isinstance(settings, Settings):
        settings = Settings()

    configuration = ProgramConfiguration(separate(cls.__name__), settings=settings, binary_name=hyphenate(cls.__name__))
    members = _members(cls)

    if settings.commands_enabled:
        for name, member in members.items():
            metadata = getattr(_function(member), "__command__", None)
            if name.startswith("_") or (metadata is None and name in settings.ignored_methods):
                continue
            if metadata is None and not name.endswith((settings.command_suffix, "Command")):
                continue
            positionals, keywords = _signature(member)
            configuration.commands.add(Command.from_signature(
                name,
                positionals,
                keywords,
                name=command_name(name, settings.command_suffix),
                help=inspect.getdoc(_function(member)) or "",
            ))
            if metadata:
                configuration.commands.add({"method": name, **metadata})
            logger.debug("discovered command %r on %s", name, cls.__qualname__)
        if settings.default_command_method in members:
            configuration._default_command = settings.default_command_method
    elif (main := members.get(settings.main_method)) is not None:
        positionals, keywords = _signature(main)
        configuration.params.add_from_signature(positionals)
        configuration.options.add_from_signature(keywords)
        if docstring := inspect.getdoc(_function(main)):
            configuration._help = docstring

    logger.debug("configured %r", configuration)
    return configuration


def inject_configuration(target, /, settings=Unset):
    """
    Build (once) and return the configuration of a program class or instance.

    The configuration is memoized on the class, so every later call, for the
    class or any of its instances, returns the same object. `settings` only
    applies to that first build; see configure() for per-instance settings.
    """
    cls = target if isinstance(target, type) else type(target)
    if isinstance(configuration := cls.__dict__.get(ATTRIBUTE), ProgramConfiguration):
        return configuration
    configuration = build_configuration(cls, settings)
    setattr(cls, ATTRIBUTE, configuration)
    return configuration


def configure(target, /, settings=Unset, definition=None):
    """
    A private, verified configuration for one program instance.

    Starts from a copy of the class configuration. When `settings` differ from
    the ones the class was configured with, the class is reflected again under
    them and the class definition is merged on top. The instance `definition`
    is merged last; the class configuration is never modified.
    """
    cls = target if isinstance(target, type) else type(target)
    shared = inject_configuration(cls)
    settings = coalesce(settings, shared.settings)
    if settings == shared.settings:
        configuration = shared.copy()
    else:
        logger.debug("reconfiguring %s for instance settings", cls.__qualname__)
        configuration = build_configuration(cls, settings).merge(shared.to_definition())
    return configuration.merge(definition).verify()


__all__ = (
    "ProgramConfiguration",
    "build_configuration",
    "inject_configuration",
    "configure",
)
