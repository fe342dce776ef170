"""
Argosy program base class.

Subclass Program, write handler methods, and run it:

    class Deploy(Program):
        settings = Settings(commands_enabled=True)

        def ship_command(self, region, *, force=False):
            '''Ship the build to a region.'''

    if __name__ == "__main__":
        raise SystemExit(Deploy().start())

Methods ending in "_command" become commands (command mode); otherwise the
`main` method receives the positional parameters (no-command mode). Keyword-only
arguments become options. The optional hooks `on_program_option(params, options)`,
`on_invalid_command(name, params, options)` and `on_exit(error, result)` are
called when defined; show_help()/show_version() may be overridden.
"""
import asyncio
import logging

from rich.console import Console

from . import faults
from .configuration import configure
from .faults import ExecutionError, FaultCode
from .help import render_help, render_version
from .runtime import Runtime
from .settings import Settings
from .utils import Unset, coalesce

logger = logging.getLogger(__name__)


class Program:
    __framework__ = True

    settings = Settings()

    def __init__(self, definition=Unset, /, *, settings=Unset, console=Unset, stderr=Unset):
        self.settings = coalesce(settings, type(self).settings)
        self.console = coalesce(console, None) or Console()
        self.stderr = coalesce(stderr, None) or faults.console
        self.configuration = configure(self, self.settings, coalesce(definition, None))
        self._runtime = Runtime(self, self.settings)
        self._running = False

    @property
    def running(self):
        return self._running

    def show_help(self, command=None, /, fault=None):
        self.console.print(render_help(self.configuration, self.settings, command, fault))

    def show_version(self):
        self.console.print(render_version(self.configuration, self.settings))

    async def run_command(self, name, /):
        """
        Re-dispatch to another command from inside a handler or hook.
        """
        return await self._runtime.run_command(name)

    async def run(self, argv=Unset, /):
        """
        Run the program once against `argv` (defaults to the process vector).

        Returns the exit code: 0 on success, 1 on failure, or whatever on_exit returns.
        """
        if self._running:
            raise ExecutionError(
                f"program {self.configuration.name!r} is already running",
                code=FaultCode.REENTRANT_RUN,
            )
        if self._runtime.program is not self:
            raise ExecutionError(
                "runtime is bound to another program",
                code=FaultCode.CONTEXT_MISMATCH,
            )

        self._running = True
        try:
            self._runtime.install()
            self._runtime.reset().init(argv)

            error, result, code = None, None, 0
            try:
                result = await self._runtime.run_program()
            except Exception as exception:
                logger.debug("program %r failed", self.configuration.name, exc_info=exception)
                if isinstance(exception, faults.ArgosyError):
                    self.stderr.print(exception.__replace__(colorful=self.settings.colorful, fancy=self.settings.fancy, program=self.configuration.binary_name))
                else:
                    self.stderr.print(f"{type(exception).__name__}: {exception}", markup=False)
                error, code = exception, 1
            return await self._runtime.exit_program(error, result, code)
        finally:
            self._running = False

    def start(self, argv=Unset, /):
        """
        Run the program on a fresh event loop and return its exit code.
        """
        return asyncio.run(self.run(argv))


__all__ = (
    "Program",
)
