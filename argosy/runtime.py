"""
Argosy runtime: map tokenized arguments onto a configuration and dispatch.

Mapping
- map_parameters(tokens, collection) walks the parameter definitions in order:
  SINGLE takes the next unconsumed token, LIST takes every remaining token.
- map_options(supplied, collection) looks every option up by name, then by alias.
- accepted_value(value, entity) matches values case-insensitively against the
  entity's accepted values and returns the canonical spelling.
- Both produce an ArgumentMap: `known` values keyed by bound attribute,
  `unknown` leftovers (positional tokens, or options nobody defined) and
  `supplied` (attributes that came from the command line rather than a default).

Dispatch
- Runtime drives one program run through CREATED -> READY -> RUNNING -> DONE
  (or ERROR). run_program() applies, in order: the no-arguments check,
  --help, --version, program options, then the main method (no-command mode)
  or the requested command (command mode).
- Handlers and hooks may be plain callables or coroutine functions.
"""
import asyncio
import inspect
import logging
from collections.abc import Mapping
from enum import Enum

from .faults import ExecutionError, FaultCode
from .parameters import PARAMS_SENTINEL, OPTIONS_SENTINEL
from .reader import ArgumentReader
from .settings import HELP_OPTIONS, VERSION_OPTIONS
from .utils import Unset, coalesce

logger = logging.getLogger(__name__)

MAX_INVALID_COMMANDS = 2


class ArgumentMap(Mapping):
    """
    Read-only view over mapped values, plus the leftovers of the mapping.
    """

    def __init__(self, known=Unset, unknown=Unset, supplied=Unset, /):
        self.known = dict(coalesce(known, {}))
        self.unknown = coalesce(unknown, [])
        self.supplied = frozenset(coalesce(supplied, ()))

    def __getitem__(self, key):
        return self.known[key]

    def __iter__(self):
        return iter(self.known)

    def __len__(self):
        return len(self.known)

    def __repr__(self):
        return f"argument-map(known={self.known!r}, unknown={self.unknown!r})"


def accepted_value(value, entity, /):
    """
    Canonical accepted value(s) for `value`, falling back to the entity default.

    Raises ExecutionError when nothing matches and the entity has no default.
    """
    if not entity.accept_only:
        return value

    choices = {}
    for choice in entity.accept_only:
        choices.setdefault(choice.lower(), choice)

    if isinstance(value, str):
        matched = choices.get(value.lower(), Unset)
    elif isinstance(value, list):
        matched = [choices[item.lower()] for item in value if isinstance(item, str) and item.lower() in choices] or Unset
    else:
        matched = Unset

    if matched is not Unset:
        return matched
    if entity.default is not None:
        return entity.default
    raise ExecutionError(
        f"value {value!r} is not allowed for {type(entity).__typename__} {entity.name!r}, "
        f"allowed values are {", ".join(entity.accept_only)}",
        code=FaultCode.VALUE_NOT_ALLOWED,
        data={"name": entity.name, "value": value, "accepted": entity.accept_only},
        hint=f"use one of: {", ".join(entity.accept_only)}",
    )


def map_parameters(tokens, collection=None, /):
    """
    Map positional tokens onto a parameter collection (None maps nothing).
    """
    tokens = list(tokens)
    known, supplied = {}, set()
    cursor = 0

    for parameter in collection if collection is not None else ():
        if parameter.is_list:
            value, cursor = tokens[cursor:], len(tokens)
        elif cursor < len(tokens):
            value, cursor = tokens[cursor], cursor + 1
        else:
            value = Unset

        if value is Unset or value == []:
            if parameter.default is not None:
                known[parameter.attribute] = parameter.default
            elif parameter.required:
                raise ExecutionError(
                    f"required parameter {parameter.name!r} is missing",
                    code=FaultCode.REQUIRED_PARAMETER,
                    data={"name": parameter.name},
                    hint=f"supply a value for <{parameter.name}>",
                )
            continue

        known[parameter.attribute] = accepted_value(value, parameter)
        supplied.add(parameter.attribute)

    return ArgumentMap(known, tokens[cursor:], supplied)


def map_options(options, collection=None, /):
    """
    Map tokenized options onto an option collection (None maps nothing).
    """
    options = dict(options)
    known, supplied, claimed = {}, set(), set()

    for option in collection if collection is not None else ():
        claimed.update(option.tokens)
        value = next((options[token] for token in option.tokens if token in options), Unset)

        if value is Unset:
            if option.default is not None:
                known[option.attribute] = option.default
            continue

        known[option.attribute] = accepted_value(value, option)
        supplied.add(option.attribute)

    return ArgumentMap(known, {name: value for name, value in options.items() if name not in claimed}, supplied)


def arguments(callback, collection, params, options, /):
    """
    Rebuild call arguments for `callback` from the mapped values.

    Positional slots come from each parameter's signature index (plus the
    "params"/"options" sentinel slots); keyword-only arguments from options by
    attribute. Positional arguments without a value are passed as None, except
    trailing ones with a signature default, which are left out so that the
    handler's own defaults apply.
    """
    slots = {}
    for parameter in collection if collection is not None else ():
        if parameter.index >= 0 and parameter.attribute in params:
            slots[parameter.index] = params[parameter.attribute]
    if collection is not None and collection.params_index >= 0:
        slots[collection.params_index] = params
    if collection is not None and collection.options_index >= 0:
        slots[collection.options_index] = options

    args, kwargs, filled = [], {}, 0
    for index, (name, parameter) in enumerate(inspect.signature(callback).parameters.items()):
        match parameter.kind:
            case inspect.Parameter.POSITIONAL_ONLY | inspect.Parameter.POSITIONAL_OR_KEYWORD:
                if index in slots:
                    args.append(slots[index])
                    filled = len(args)
                elif parameter.default is inspect.Parameter.empty:
                    args.append(None)
                    filled = len(args)
                else:
                    args.append(parameter.default)
            case inspect.Parameter.VAR_POSITIONAL:
                if index in slots:
                    value = slots[index]
                    args.extend(value if isinstance(value, list) else [value])
                    filled = len(args)
            case inspect.Parameter.KEYWORD_ONLY:
                if name == PARAMS_SENTINEL:
                    kwargs[name] = params
                elif name == OPTIONS_SENTINEL:
                    kwargs[name] = options
                elif name in options:
                    kwargs[name] = options[name]
    return args[:filled], kwargs


async def call(callback, /, *args, **kwargs):
    """
    Call a handler and await its result when it returns an awaitable.
    """
    result = callback(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


_rejection_handler = None


def handle_rejections(handler, /):
    """
    Register the process-wide handler for unhandled asyncio failures (first call wins).

    Returns the registered handler.
    """
    global _rejection_handler
    if _rejection_handler is None and handler is not None:
        _rejection_handler = handler
    return _rejection_handler


class RuntimeState(Enum):
    CREATED = "created"
    READY = "ready"
    RUNNING = "running"
    DONE = "done"
    ERROR = "error"


class Runtime:
    def __init__(self, program, /, settings=Unset):
        self.program = program
        self.settings = coalesce(settings, program.settings)
        if self.settings.argv_start < 2:
            raise ExecutionError(
                f"argument start index must be at least 2, got {self.settings.argv_start}",
                code=FaultCode.INVALID_START_INDEX,
                data=self.settings.argv_start,
            )
        self.reader = ArgumentReader(self.settings)
        self.state = RuntimeState.CREATED
        self.requested = ""
        self._invalid = 0

    @property
    def configuration(self):
        return self.program.configuration

    @property
    def help_requested(self):
        return self.settings.help_option_enabled and self.reader.contains_option(HELP_OPTIONS)

    @property
    def version_requested(self):
        return self.settings.version_option_enabled and self.reader.contains_option(VERSION_OPTIONS)

    def _transition(self, expected, state):
        if self.state is not expected:
            raise ExecutionError(
                f"runtime cannot move to {state.value!r} while {self.state.value!r}",
                code=FaultCode.INVALID_STATE,
                data={"state": self.state.value, "expected": expected.value},
            )
        logger.debug("runtime %s -> %s", self.state.value, state.value)
        self.state = state

    def init(self, argv=Unset, /):
        """
        Read the arguments and extract the requested command name.
        """
        self._transition(RuntimeState.CREATED, RuntimeState.READY)
        self.reader.read(argv)
        self.requested = self.reader.command
        return self

    def reset(self):
        self.state = RuntimeState.CREATED
        self.requested = ""
        self._invalid = 0
        return self

    def _hook(self, name):
        return callback if callable(callback := getattr(self.program, name, None)) else None

    async def _show_help(self, command=Unset, fault=Unset):
        if fault is Unset:
            return await call(self.program.show_help, coalesce(command, None))
        return await call(self.program.show_help, coalesce(command, None), fault=fault)

    async def run_program(self):
        """
        Dispatch the arguments read by init(); only legal once READY.
        """
        self._transition(RuntimeState.READY, RuntimeState.RUNNING)
        try:
            result = await self._dispatch()
        except BaseException:
            self.state = RuntimeState.ERROR
            raise
        self.state = RuntimeState.DONE
        return result

    async def _dispatch(self):
        configuration, settings, reader = self.configuration, self.settings, self.reader

        if reader.is_empty():
            if settings.commands_enabled and settings.show_help_on_no_command:
                logger.debug("no arguments, showing program help")
                return await self._show_help()
            if not settings.commands_enabled and configuration.params.contains_required():
                logger.debug("no arguments for required main parameters, showing program help")
                return await self._show_help()

        if self.help_requested:
            return await self._show_help(self.requested or Unset)

        if self.version_requested:
            return await call(self.program.show_version)

        if (options := await self._map_options(configuration.options)) is None:
            return None

        if not settings.commands_enabled:
            if (params := await self._map_parameters(configuration.params)) is None:
                return None
            if (main := self._hook(settings.main_method)) is None:
                return None
            args, kwargs = arguments(main, configuration.params, params, options)
            logger.debug("dispatching %s", settings.main_method)
            return await call(main, *args, **kwargs)

        hook = self._hook("on_program_option")
        if options.supplied and hook is not None and (not self.requested or settings.prioritize_program_options):
            logger.debug("dispatching program options to on_program_option")
            return await call(hook, map_parameters(reader.params), options)

        return await self.run_command(self.requested or configuration.default_command)

    async def _map_parameters(self, collection, command=Unset):
        try:
            return map_parameters(self.reader.params, collection)
        except ExecutionError as fault:
            if not self.settings.show_help_on_invalid_params:
                raise
            await self._show_help(command, fault)
            return None

    async def _map_options(self, collection, command=Unset):
        try:
            return map_options(self.reader.options, collection)
        except ExecutionError as fault:
            if not self.settings.show_help_on_invalid_options:
                raise
            await self._show_help(command, fault)
            return None

    async def run_command(self, name, /):
        """
        Resolve `name` against the commands and invoke its handler.

        Unknown names go to on_invalid_command (at most MAX_INVALID_COMMANDS
        times per run) and then to program help.
        """
        configuration = self.configuration

        if not name:
            return await self._show_help()

        if name == "help" and self.settings.help_command_enabled and configuration.resolve_command(name) is None:
            return await self._show_help()

        if (command := configuration.resolve_command(name)) is None:
            if name and name == configuration.default_command and (method := self._hook(name)) is not None:
                logger.debug("dispatching default command %s", name)
                return await call(method)

            self._invalid += 1
            if (hook := self._hook("on_invalid_command")) is not None and self._invalid <= MAX_INVALID_COMMANDS:
                logger.debug("unknown command %r, dispatching on_invalid_command", name)
                return await call(hook, name, map_parameters(self.reader.params), map_options(self.reader.options))
            return await self._show_help()

        if (params := await self._map_parameters(command.params, command.name)) is None:
            return None
        if (options := await self._map_options(command.options, command.name)) is None:
            return None

        method = getattr(self.program, command.method)
        args, kwargs = arguments(method, command.params, params, options)
        logger.debug("dispatching command %r to %s", command.name, command.method)
        return await call(method, *args, **kwargs)

    async def exit_program(self, error=None, result=None, code=0, /):
        """
        Decide the exit code: on_exit may override it; without the hook errors propagate.
        """
        if (hook := self._hook("on_exit")) is not None:
            if (override := await call(hook, error, result)) is not None:
                return override
            return code
        if error is not None:
            raise error
        return code

    def install(self, loop=None, /):
        """
        Install the registered rejection handler on the running event loop.
        """
        if (handler := handle_rejections(self.settings.rejection_handler)) is not None:
            (loop or asyncio.get_running_loop()).set_exception_handler(handler)
        return handler


__all__ = (
    "ArgumentMap",
    "RuntimeState",
    "Runtime",
    "accepted_value",
    "map_parameters",
    "map_options",
    "arguments",
    "call",
    "handle_rejections",
)
