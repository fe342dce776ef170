"""
Argosy decorators: a thin layer over the configuration API.

    @program(version="2.1.0", help="Ship builds around.")
    class Deploy(Program):
        settings = Settings(commands_enabled=True)

        @command(name="ship", params=[{"name": "region", "required": True, "accept_only": ["eu", "us"]}])
        def ship_it(self, region): ...

@command attaches its definition to the function; the configuration picks it
up (in command mode) when the class is first configured. @program configures
the class immediately, merges its definition and verifies the result.
"""
from .configuration import inject_configuration
from .utils import Unset, rename


def command(source=Unset, /, *, name=Unset, help=Unset, params=(), options=()):
    """
    Mark a method as a command, with an optional definition merged on top of its signature.

    Usable bare (@command) or with arguments (@command(name=..., ...)).
    """
    definition = {
        key: value for key, value in {
            "name": name,
            "help": help,
            "params": [dict(param) for param in params],
            "options": [dict(option) for option in options],
        }.items() if value is not Unset
    }

    def wrapper(function, /):
        target = function.__func__ if isinstance(function, staticmethod | classmethod) else function
        if not callable(target):
            raise TypeError("@command() must be applied to a method")
        target.__command__ = definition
        return function

    if source is Unset:
        return rename(wrapper, "command")
    return wrapper(source)


def program(source=Unset, /, *, settings=Unset, **definition):
    """
    Configure a program class from a definition (name, help, version,
    binary_name, default_command, params, options, commands).
    """

    def wrapper(cls, /):
        if not isinstance(cls, type):
            raise TypeError("@program() must be applied to a class")
        if settings is not Unset:
            cls.settings = settings
        configuration = inject_configuration(cls, getattr(cls, "settings", Unset))
        configuration.merge(definition)
        configuration.verify()
        return cls

    if source is Unset:
        return rename(wrapper, "program")
    return wrapper(source)


__all__ = (
    "command",
    "program",
)
