"""Built-in commands of the console."""

from __future__ import annotations

from typing import TYPE_CHECKING, assert_never

from .custom_types import Accepted, Mode
from .grammar import command, wrapper
from .help_format import format_commands, usage
from .nodes import (
    PRIORITY_PARAMETER,
    CommandNode,
    FlagParameterNode,
    NamedParameterNode,
    SimpleParameterNode,
    WrapperNode,
)
from .program_constants import PROGRAM_CONSTANTS
from .program_logging import get_logger

if TYPE_CHECKING:
    from .shell import Shell

logger = get_logger("handlers")


@command("configure", Mode.USER, "Enter privileged configuration mode")
def h_configure(shell: Shell, accepted: Accepted) -> int:
    """Enter admin (privileged) mode from user mode."""
    logger.info("Entering privileged configuration mode")
    shell.set_mode(Mode.ADMIN)
    return 0


@command("end", Mode.ADMIN, "Exit configuration mode", hidden=True)
@command("exit", Mode.ADMIN, "Exit configuration mode")
@command("exit", Mode.USER, "Exit the CLI")
def h_exit(shell: Shell, accepted: Accepted) -> int:
    """Leave admin mode, or end the session when already in user mode."""
    match shell.mode:
        case Mode.ADMIN:
            logger.info("Exiting configuration mode, returning to user mode")
            shell.set_mode(Mode.USER)
            return 0
        case Mode.USER:
            logger.info("Exiting CLI from user mode")
            return -1
        case _:
            assert_never(shell.mode)


@wrapper("help", Mode.USER, "Describe a command, or list all commands")
@wrapper("help", Mode.ADMIN, "Describe a command, or list all commands")
def h_help(shell: Shell, accepted: Accepted) -> int:
    """Show the usage of the command after "help", or every command."""
    words = [node.name for node in accepted.path if isinstance(node, CommandNode)]
    targets = [
        node
        for node in accepted.path[1:]
        if isinstance(node, (CommandNode, WrapperNode))
    ]
    if targets:
        target = targets[-1]
        print(f"Usage: {usage(target, words)}")
        if target.help_text:
            print(f"  {target.help_text}")
        return 0

    listing = format_commands(shell.grammar.root)
    if not listing:
        print("No commands available in this mode.")
        logger.warning(f"No commands available in {shell.mode.value} mode")
        return 0

    print(f"Available commands in {shell.mode.value} mode:")
    print(listing)
    return 0


@command("show version", Mode.USER, "Show the program version")
def h_show_version(shell: Shell, accepted: Accepted) -> int:
    print(f"{PROGRAM_CONSTANTS.NAME} {PROGRAM_CONSTANTS.VERSION}")
    return 0


@command(
    "show running-config",
    Mode.ADMIN,
    "Show the current configuration",
    parameters=[FlagParameterNode("all", help="Include interfaces that are shut down")],
)
@command(
    "show running-config",
    Mode.USER,
    "Show the current configuration",
    parameters=[FlagParameterNode("all", help="Include interfaces that are shut down")],
)
def h_show_running_config(shell: Shell, accepted: Accepted) -> int:
    config = shell.running_config
    show_all = accepted.values.get("all", False)
    print(f"hostname {config['hostname']}")
    for name, settings in sorted(config["interfaces"].items()):
        if settings.get("shutdown") and not show_all:
            continue
        print(f"interface {name}")
        if "mtu" in settings:
            print(f" mtu {settings['mtu']}")
        if settings.get("shutdown"):
            print(" shutdown")
    return 0


@command(
    "ping",
    Mode.USER,
    "Send echo requests to one or more hosts",
    parameters=[
        SimpleParameterNode(
            "host",
            priority=PRIORITY_PARAMETER - 10,
            required=True,
            repeatable=True,
            help="Host to ping",
        ),
        NamedParameterNode(
            "count", accepts=str.isdigit, convert=int, help="Number of echo requests"
        ),
    ],
)
def h_ping(shell: Shell, accepted: Accepted) -> int:
    count = accepted.values.get("count", 5)
    for host in accepted.values["host"]:
        print(f"Sending {count} echo requests to {host}")
    return 0


@command(
    "hostname",
    Mode.ADMIN,
    "Set the system host name",
    parameters=[SimpleParameterNode("name", required=True, help="New host name")],
)
def h_hostname(shell: Shell, accepted: Accepted) -> int:
    old = shell.running_config["hostname"]
    shell.running_config["hostname"] = accepted.values["name"]
    logger.info(f"Host name changed: {old} -> {accepted.values['name']}")
    return 0


@command(
    "interface",
    Mode.ADMIN,
    "Configure an interface",
    parameters=[
        SimpleParameterNode(
            "name",
            priority=PRIORITY_PARAMETER - 10,
            required=True,
            help="Interface name",
        ),
        NamedParameterNode(
            "mtu", accepts=str.isdigit, convert=int, help="Maximum transmission unit"
        ),
        FlagParameterNode("shutdown", help="Administratively disable the interface"),
    ],
)
def h_interface(shell: Shell, accepted: Accepted) -> int:
    values = accepted.values
    settings = shell.running_config["interfaces"].setdefault(values["name"], {})
    if "mtu" in values:
        settings["mtu"] = values["mtu"]
    if values.get("shutdown"):
        settings["shutdown"] = True
    logger.info(f"Interface {values['name']} configured: {settings}")
    return 0
