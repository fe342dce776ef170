"""
Argosy help and version renderers.

render_help() and render_version() build rich renderables from a program
configuration; the Program prints them on its console.

Palette keys
- program-name, program-version, program-help, usage-label, usage-section
- section-label, command-table, command-title, command, command-description
- parameter, option, alias, required, accepted-label, accepted, hint
- panel-title

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- When settings.colorful is False, styling is suppressed.
"""
from collections import defaultdict

from rich.box import ROUNDED
from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .utils import Unset, coalesce


def _palette(settings):
    styles = defaultdict(str, {
        # === Head sections ===
        "program-name": "bold #FF4D94",
        "program-version": "bold #00E6FF",
        "program-help": "italic #A3A3A3",
        "usage-label": "bold #00E6FF",
        "usage-section": "bold #36C5F0",

        # === Sections ===
        "section-label": "bold #FFFFFF",
        "command-table": "#4B5563",
        "command-title": "bold #FFFFFF",
        "command": "bold #36C5F0",
        "command-description": "#9CA3AF",

        # === Arguments ===
        "parameter": "bold #FFD600",
        "option": "bold #00E6FF",
        "alias": "#22C55E",
        "required": "bold #EF4444",
        "accepted-label": "bold #FFFFFF",
        "accepted": "bold #FF4D94",
        "description": "#9CA3AF",
        "hint": "italic #9CE19C",

        # === Fancy panel ===
        "panel-title": "bold #FF4D94",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if settings.colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not settings.colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styler(style))

    return styler, text


def _flag(name):
    return ("-" if len(name) == 1 else "--") + name


def _rows(title, rows, text):
    """
    A two-column section: names on the left, descriptions on the right.
    """
    table = Table.grid(padding=(0, 3))
    table.add_column(no_wrap=True)
    table.add_column()
    for row in rows:
        table.add_row(*row)
    return Group(Text(""), Text.assemble(text(title, "section-label"), ":"), Text(""), table)


def _parameter_rows(parameters, text):
    rows = []
    for parameter in parameters:
        label = f"<{parameter.name}...>" if parameter.is_list else f"<{parameter.name}>"
        description = text(parameter.help, "description")
        if parameter.required:
            description = Text.assemble(description, " " if parameter.help else "", text("(required)", "required"))
        rows.append((text(label, "parameter"), description))
        if parameter.accept_only:
            rows.append((Text(""), Text.assemble(text("accepted values: ", "accepted-label"), text(", ".join(parameter.accept_only), "accepted"))))
    return rows


def _option_rows(options, text):
    rows = []
    for option in options:
        rows.append((text(_flag(option.name), "option"), text(option.help, "description")))
        if option.aliases:
            rows.append((Text(""), Text.assemble(text("other names: ", "accepted-label"), text(", ".join(map(_flag, option.aliases)), "alias"))))
        if option.accept_only:
            rows.append((Text(""), Text.assemble(text("accepted values: ", "accepted-label"), text(", ".join(option.accept_only), "accepted"))))
    return rows


def _usage(text, *parts):
    return Group(Text(""), Text.assemble(text("usage", "usage-label"), ": ", text(" ".join(filter(None, parts)), "usage-section")))


def _program_help(configuration, settings, styler, text):
    renders = [
        Text.assemble(text(configuration.name, "program-name"), " ", text(f"v{configuration.version}", "program-version")),
    ]
    if configuration.help:
        renders.append(Group(Text(""), text(configuration.help, "program-help")))

    commands_enabled = settings.commands_enabled
    if commands_enabled:
        renders.append(_usage(
            text,
            configuration.binary_name,
            "<command>" if len(configuration.commands) else "",
            "[options ...]" if len(configuration.options) else "",
        ))
    else:
        params = list(configuration.params)
        renders.append(_usage(
            text,
            configuration.binary_name,
            (f"<{params[0].name}>" if len(params) == 1 else "[params ...]") if params else "",
            "[options ...]" if params or len(configuration.options) else "",
        ))

    if commands_enabled and len(configuration.commands):
        table = Table(
            "name", "help",
            title=text("commands", "command-title"),
            box=ROUNDED,
            style=styler("command-table"),
            header_style=styler("command-title"),
        )
        for command in configuration.commands:
            table.add_row(text(command.name, "command"), text(command.help, "command-description"))
        renders.append(Group(Text(""), table))
    elif not commands_enabled and len(configuration.params):
        renders.append(_rows("parameters", _parameter_rows(configuration.params, text), text))

    if len(configuration.options):
        renders.append(_rows("options", _option_rows(configuration.options, text), text))

    if commands_enabled and len(configuration.commands):
        renders.append(Group(Text(""), text("see command help for more options", "hint")))

    binary, others = configuration.binary_name, []
    if settings.help_option_enabled:
        others.append((f"{binary} --help, -h", "view this help"))
        if commands_enabled and len(configuration.commands):
            others.append((f"{binary} <command> --help, -h", "view command help"))
    if settings.version_option_enabled:
        others.append((f"{binary} --version, -v", "view the version"))
    if settings.help_command_enabled and commands_enabled:
        others.append((f"{binary} help", "view this help"))
    if others:
        renders.append(_rows("other usage", [(text(usage, "usage-section"), text(description, "description")) for usage, description in others], text))

    return renders


def _command_help(configuration, command, text):
    renders = []
    if command.help:
        renders.append(text(command.help, "program-help"))
    renders.append(_usage(
        text,
        configuration.binary_name,
        command.name,
        "[param ...]" if len(command.params) else "",
        "[options ...]" if len(command.options) else "",
    ))
    if len(command.params):
        renders.append(_rows("parameters", _parameter_rows(command.params, text), text))
    if len(command.options):
        renders.append(_rows("options", _option_rows(command.options, text), text))
    return renders


def render_help(configuration, settings=Unset, command=None, fault=None, /):
    """
    Program help, or command help when `command` names a known command.

    Unknown command names and "help" render program help. A fault, when given,
    is rendered above the help.
    """
    settings = coalesce(settings, configuration.settings)
    styler, text = _palette(settings)

    resolved = configuration.resolve_command(command) if command and command != "help" else None
    if resolved is not None:
        renders = _command_help(configuration, resolved, text)
        title = f"{configuration.binary_name} {resolved.name} help"
    else:
        renders = _program_help(configuration, settings, styler, text)
        title = f"{configuration.binary_name} help"

    if fault is not None:
        renders.insert(0, Group(fault.__replace__(colorful=settings.colorful, program=configuration.binary_name)
                                if hasattr(fault, "__replace__") else text(str(fault), "required"), Text("")))

    renderable = Group(*renders)
    if settings.fancy:
        renderable = Panel(
            renderable,
            title=Text.assemble("[ ", title.upper(), " ]", style=styler("panel-title")),
            title_align="left",
        )
    return renderable


def render_version(configuration, settings=Unset, /):
    settings = coalesce(settings, configuration.settings)
    styler, text = _palette(settings)
    renderable = Text.assemble(text(configuration.name, "program-name"), " ", text(f"v{configuration.version}", "program-version"))
    if settings.fancy:
        renderable = Panel(renderable, title=Text.assemble("[ VERSION ]", style=styler("panel-title")), title_align="left")
    return renderable


__all__ = (
    "render_help",
    "render_version",
)
