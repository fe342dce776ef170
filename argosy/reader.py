"""
Argosy argument reader.

ArgumentReader turns a raw argument vector into three parts:

- command: the first positional token when command mode is enabled ("" otherwise);
- params: the remaining positional tokens, in order;
- options: a dict of option name -> value.

Tokenization follows the familiar minimist conventions:

    --name=value      name: "value"
    --name value      name: "value"   (unless the next token is a flag or name is boolean)
    --name            name: True
    --no-name         name: False
    -abc              a: True, b: True, c: True   (c may take the following value)
    -n=value / -n5    n: "value" / n: "5"
    --                every following token is positional
    repeated flags    collect into a list in the order given

Negative numbers ("-5", "-1.5") are positional tokens.
"""
import re
import sys
from collections import deque

from .settings import Settings, HELP_OPTIONS, VERSION_OPTIONS
from .utils import Unset, coalesce, mirror

NUMBER = re.compile(r"-?\d+(\.\d+)?([eE][-+]?\d+)?")


def process_argv():
    """
    The process vector as the operating system sees it: interpreter, script, arguments.
    """
    return [sys.executable, *sys.argv]


def _is_flag(token):
    return len(token) > 1 and token.startswith("-") and not NUMBER.fullmatch(token)


def _store(options, name, value):
    if name not in options:
        options[name] = value
    elif isinstance(options[name], list):
        options[name].append(value)
    else:
        options[name] = [options[name], value]


class ArgumentReader:
    supplied = mirror("supplied")
    command = mirror("command")
    params = mirror("params")
    options = mirror("options")

    def __init__(self, settings=Unset, /):
        self.settings = coalesce(settings, Settings())
        self._supplied = []
        self._command = ""
        self._params = []
        self._options = {}

    def _boolean(self, name):
        return (
            name in self.settings.boolean_options
            or (self.settings.help_option_enabled and name in HELP_OPTIONS)
            or (self.settings.version_option_enabled and name in VERSION_OPTIONS)
        )

    def _takes_value(self, name, tokens):
        return not self._boolean(name) and bool(tokens) and not _is_flag(tokens[0])

    def read(self, argv=Unset, /):
        """
        Tokenize `argv` (the full process vector, sliced at settings.argv_start).

        Every call reflects the latest input; nothing is memoized across calls.
        """
        vector = list(process_argv() if argv is Unset or argv is None else argv)
        self._supplied = vector[self.settings.argv_start:]

        params, options = [], {}
        tokens = deque(self._supplied)

        while tokens:
            token = tokens.popleft()

            if token == "--":
                params.extend(tokens)
                break

            if not _is_flag(token):
                params.append(token)
                continue

            if token.startswith("--"):
                if (match := re.fullmatch(r"--([^=]+)=(.*)", token, re.DOTALL)) is not None:
                    _store(options, match[1], match[2])
                elif (match := re.fullmatch(r"--no-(.+)", token)) is not None:
                    _store(options, match[1], False)
                elif self._takes_value(name := token[2:], tokens):
                    _store(options, name, tokens.popleft())
                else:
                    _store(options, name, True)
                continue

            letters = token[1:]
            if (match := re.fullmatch(r"(\w)=(.*)", letters, re.DOTALL)) is not None:
                _store(options, match[1], match[2])
                continue

            for index, letter in enumerate(letters[:-1]):
                rest = letters[index + 1:]
                if letter.isalpha() and (NUMBER.fullmatch(rest) or not rest[0].isalnum()):
                    _store(options, letter, rest)
                    break
                _store(options, letter, True)
            else:
                letter = letters[-1]
                if letter != "-" and self._takes_value(letter, tokens):
                    _store(options, letter, tokens.popleft())
                else:
                    _store(options, letter, True)

        self._command = params.pop(0) if self.settings.commands_enabled and params else ""
        self._params = params
        self._options = options
        return self

    def contains_option(self, names, /):
        if isinstance(names, str):
            names = [names]
        return any(name in self._options for name in names)

    def options_supplied(self):
        return bool(self._options)

    def is_empty(self):
        return not self._supplied

    def __repr__(self):
        return f"argument-reader(command={self._command!r}, params={self._params!r}, options={self._options!r})"


__all__ = (
    "ArgumentReader",
    "process_argv",
)
