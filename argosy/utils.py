"""
Argosy utilities (internal helpers, carefully exposed)

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/[].

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated wrappers for clean tracebacks.

- mirror("attr")
  • Read-only property factory exposing a private backing field (self._attr) with
    copies for containers, so public views never leak internal state.

- Name transforms used to derive canonical names from Python identifiers:
  • words(text): split any casing style (camel, pascal, snake, kebab, dotted, spaced) into words.
  • pascalcase / camelcase / hyphenate / separate / identifier.

Quick examples
    >>> hyphenate("deployNow")       # "deploy-now"
    >>> pascalcase("deploy_now")     # "DeployNow"
    >>> camelcase("deploy.now")      # "deployNow"
    >>> separate("DeployTool")       # "Deploy Tool"
    >>> identifier("dry-run")        # "dry_run"
"""
import builtins
import functools
import inspect
import re
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Non-subclassable and a singleton per process.
    """

    def __or__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsey values like None, 0, "" or [] are preserved as-is; only Unset is replaced.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    - Function form: rename(callable, name) -> callable
    - Decorator form: rename(name) -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _immortalize(object):
    """
    Recursively copy container values so callers never hold the backing container.

    Sequences (non-string) become lists, mappings become dicts, sets become sets;
    anything else is returned as-is.
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return list(map(_immortalize, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_immortalize, object.values())))
    elif isinstance(object, Set):
        return set(map(_immortalize, object))
    else:
        return object


def mirror(name, /):
    """
    Define a read-only property that mirrors the private attribute "_{name}".

    Container values are copied on every read (see _immortalize).
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    return property(getter)


@functools.cache
def words(text, /):
    """
    Split an identifier written in any casing style into its words.

    Dots, underscores, dashes, colons, commas and whitespace are separators; a
    lower-to-upper transition (or an acronym followed by a capitalized word)
    starts a new word. Characters that are not separators are kept untouched,
    so "1My-#Param-two" yields ("1", "My", "#Param", "two").
    """
    if not isinstance(text, str):
        raise TypeError("words() argument must be a string")
    spaced = re.sub(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])", " ", text)
    return tuple(filter(None, re.split(r"[\s._\-:,]+", spaced)))


def pascalcase(text, /):
    """
    "deploy_now" -> "DeployNow"; only the first letter of each word is touched.
    """
    return "".join(word[:1].upper() + word[1:] for word in words(text))


def camelcase(text, /):
    """
    "deploy-now" -> "deployNow"
    """
    pascal = pascalcase(text)
    return pascal[:1].lower() + pascal[1:]


def hyphenate(text, /):
    """
    "DeployNow" / "deploy_now" / "deploy now" -> "deploy-now"
    """
    return "-".join(word.lower() for word in words(text))


def separate(text, /):
    """
    "DeployTool" -> "Deploy Tool"; the casing of each word is preserved.
    """
    return " ".join(words(text))


def identifier(text, /):
    """
    Canonical snake_case bound property for a user-facing name ("dry-run" -> "dry_run").
    """
    return hyphenate(text).replace("-", "_")


def reflect(callback, /):
    """
    Split a callable's signature into positional and keyword-only parameter names.

    Variadic positionals are reported with a leading "*" ("*files"); **kwargs is ignored.
    For functions taken from a class body the caller drops `self` itself.
    """
    positionals, keywords = [], []
    for parameter in inspect.signature(callback).parameters.values():
        match parameter.kind:
            case inspect.Parameter.POSITIONAL_ONLY | inspect.Parameter.POSITIONAL_OR_KEYWORD:
                positionals.append(parameter.name)
            case inspect.Parameter.VAR_POSITIONAL:
                positionals.append("*" + parameter.name)
            case inspect.Parameter.KEYWORD_ONLY:
                keywords.append(parameter.name)
    return positionals, keywords


Unset = UnsetType()
"""
Sentinel for “not provided”, distinct from None; materialize with coalesce().
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "words",
    "pascalcase",
    "camelcase",
    "hyphenate",
    "separate",
    "identifier",
    "reflect",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
