"""
Argosy faults and their rendering.

Scope
- FaultCode: stable numeric identifiers for every fault the framework raises.
  Configuration faults live in the 21xxx range, runtime faults in 22xxx.
- ArgosyError: base exception carrying a message, a structured `data` payload
  and a code. Instances render themselves with rich (see __rich__).
- ConfigurationError: raised while a program configuration is assembled
  (names, aliases, parameter ordering). Always fatal to the build.
- ExecutionError: raised while a program runs (missing/invalid arguments,
  invalid runtime state). Also a builtin RuntimeError so that generic handlers
  keep working.

Styling
- Define a mapping named __styles__ in __main__ to override any palette entry.
- The host may provide __codes__ in __main__ to relabel codes (FaultCode.normalize()).
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - entities (2110x): EMPTY_NAME, MISSING_METHOD
    - collections (2111x): INVALID_KEY, DUPLICATE_KEY, MISSING_KEY
    - parameters (2112x): DUPLICATE_ATTRIBUTE, REQUIRED_AFTER_OPTIONAL, MULTIPLE_LISTS,
      PARAMETER_AFTER_LIST, ATTRIBUTE_RENAME
    - options (2113x): ALIAS_COLLISION
    - commands (2114x): DUPLICATE_COMMAND
    - program (2115x): UNTYPED_TARGET
    - arguments (2210x): REQUIRED_PARAMETER, VALUE_NOT_ALLOWED
    - runtime (2211x): INVALID_START_INDEX, INVALID_STATE, REENTRANT_RUN, CONTEXT_MISMATCH
    """
    # --- configuration faults (21xxx) ---
    EMPTY_NAME              = 21101
    MISSING_METHOD          = 21102
    INVALID_KEY             = 21111
    DUPLICATE_KEY           = 21112
    MISSING_KEY             = 21113
    DUPLICATE_ATTRIBUTE     = 21121
    REQUIRED_AFTER_OPTIONAL = 21122
    MULTIPLE_LISTS          = 21123
    PARAMETER_AFTER_LIST    = 21124
    ATTRIBUTE_RENAME        = 21125
    ALIAS_COLLISION         = 21131
    DUPLICATE_COMMAND       = 21141
    UNTYPED_TARGET          = 21151

    # --- runtime faults (22xxx) ---
    REQUIRED_PARAMETER      = 22101
    VALUE_NOT_ALLOWED       = 22102
    INVALID_START_INDEX     = 22111
    INVALID_STATE           = 22112
    REENTRANT_RUN           = 22113
    CONTEXT_MISMATCH        = 22114

    def normalize(self):
        """
        return a host-normalized string for this code (see __codes__ in __main__).
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ArgosyError(Exception):
    """
    Base fault: message + code + optional structured data.

    Rendering options (program name, colorful, fancy, hint) can be attached
    with __replace__ before the fault is printed.
    """
    __title__ = "fault"

    def __init__(self, message=Unset, /, *, code=Unset, data=Unset, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = coalesce(message, "")
        self.code = code
        self.data = coalesce(data)
        self.options = MappingProxyType(options)

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",

            # body
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), styles[style])

        code = self.code.normalize() if isinstance(self.code, FaultCode) else "-"
        header = Text.assemble(
            "[ ",
            text(getattr(main, "__prog__", self.options.get("program", "argosy")), "prog-name"),
            " — ",
            text(code, "code"),
            " | ",
            text(self.__title__.title(), "error-title"),
            " ]"
        )
        message = text(self.message, "error-message")
        parts = [message]
        if hint := self.options.get("hint"):
            parts.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

        if fancy:
            return Panel(Group(*parts), title=header, title_align="left")
        return Group(header, *parts)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, code=self.code, data=self.data, **{**self.options, **overrides})


class ConfigurationError(ArgosyError):
    __title__ = "configuration error"


class ExecutionError(ArgosyError, RuntimeError):
    __title__ = "runtime error"


__all__ = (
    "FaultCode",
    "ArgosyError",
    "ConfigurationError",
    "ExecutionError",
)
