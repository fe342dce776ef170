"""
Argosy settings.

Settings is an immutable value threaded explicitly through the program, its
configuration, the argument reader and the runtime. Derive variants with
Settings._replace(...) or by passing keywords to the constructor.
"""
from typing import NamedTuple, Any

HOOKS = ("on_program_option", "on_invalid_command", "on_exit", "show_help", "show_version")

HELP_OPTIONS = ("help", "h")
VERSION_OPTIONS = ("version", "ver", "v")


class Settings(NamedTuple):
    # operating mode
    commands_enabled: bool = False
    main_method: str = "main"
    default_command_method: str = "default_command"
    command_suffix: str = "_command"
    excluded_methods: tuple = ()

    # input
    argv_start: int = 2
    boolean_options: tuple = ()

    # built-ins
    help_option_enabled: bool = True
    help_command_enabled: bool = True
    version_option_enabled: bool = True

    # dispatch policy
    show_help_on_no_command: bool = True
    show_help_on_invalid_params: bool = True
    show_help_on_invalid_options: bool = True
    prioritize_program_options: bool = False

    # process
    rejection_handler: Any = None

    # rendering
    colorful: bool = True
    fancy: bool = False

    @property
    def ignored_methods(self):
        """
        Method names never discovered as commands.
        """
        return frozenset((*HOOKS, self.main_method, self.default_command_method, *self.excluded_methods))


__all__ = (
    "Settings",
    "HOOKS",
    "HELP_OPTIONS",
    "VERSION_OPTIONS",
)
