"""CLI application framework.

Provides a declarative way to build CLI applications with:
- Command registration via decorators
- Nested command groups of any depth ("spo page clientsidewebpart add")
- Common arguments (--profile, --verbose, --debug, --output, ...)
- Logging setup and consistent error handling
"""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field
from typing import (
    Any,
    Callable,
    Dict,
    List,
    Optional,
    Sequence,
    Tuple,
)

from .cli_errors import CLIError, ExitCode, handle_error
from .cli_output import OutputConfig, OutputFormat, OutputWriter


CommandFunc = Callable[[argparse.Namespace], int]
Path = Tuple[str, ...]

LOG_FORMAT = "%(message)s"
DEBUG_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


@dataclass
class Argument:
    """Definition of a CLI argument."""
    name_or_flags: tuple
    kwargs: Dict[str, Any] = field(default_factory=dict)


@dataclass
class CommandDef:
    """Definition of a CLI command."""
    name: str
    func: CommandFunc
    help: str = ""
    description: str = ""
    arguments: List[Argument] = field(default_factory=list)
    aliases: List[str] = field(default_factory=list)
    parent: Path = ()


@dataclass
class GroupDef:
    """Help text for an intermediate command group."""
    name: str
    help: str = ""
    description: str = ""


def split_path(name: str) -> Path:
    """Split "spo page add" or "spo.page.add" into its parts."""
    return tuple(part for part in name.replace(".", " ").split() if part)


def configure_logging(verbose: bool = False, debug: bool = False, stream=None) -> None:
    """Route log records to stderr at a level picked by the CLI flags."""
    if debug:
        level, fmt = logging.DEBUG, DEBUG_LOG_FORMAT
    elif verbose:
        level, fmt = logging.INFO, LOG_FORMAT
    else:
        level, fmt = logging.WARNING, LOG_FORMAT
    logging.basicConfig(level=level, format=fmt, stream=stream or sys.stderr, force=True)


class CLIApp:
    """Base class for CLI applications.

    Example usage:
        app = CLIApp("m365", "Microsoft 365 CLI")
        page = app.group("spo page", help="Manage modern pages")

        @page.command("list", help="List pages")
        @page.argument("--web-url", "-u", required=True)
        def cmd_list(args):
            ...
            return 0

        if __name__ == "__main__":
            app.main()
    """

    def __init__(
        self,
        name: str,
        description: str = "",
        *,
        version: Optional[str] = None,
        epilog: Optional[str] = None,
        add_common_args: bool = True,
    ):
        """Initialize the CLI application.

        Args:
            name: Program name (used in help text).
            description: Program description.
            version: Optional version string.
            epilog: Optional text to display after help.
            add_common_args: Whether to add common args (--verbose, --output, etc.).
        """
        self.name = name
        self.description = description
        self.version = version
        self.epilog = epilog
        self.add_common_args = add_common_args

        self._commands: Dict[Path, CommandDef] = {}
        self._groups: Dict[Path, GroupDef] = {}
        self._parser: Optional[argparse.ArgumentParser] = None
        self._pending_arguments: List[Argument] = []

    def command(
        self,
        name: str,
        *,
        help: str = "",
        description: str = "",
        aliases: Optional[List[str]] = None,
    ) -> Callable[[CommandFunc], CommandFunc]:
        """Decorator to register a command.

        Args:
            name: Full command path, e.g. "teams guestsettings list".
            help: Short help text for the command.
            description: Longer description for command help.
            aliases: Alternative names for the last path element.
        """
        path = split_path(name)

        def decorator(func: CommandFunc) -> CommandFunc:
            # Collect any pending arguments from @argument decorators
            arguments = list(reversed(self._pending_arguments))
            self._pending_arguments.clear()

            cmd_def = CommandDef(
                name=path[-1],
                func=func,
                help=help,
                description=description or help,
                arguments=arguments,
                aliases=aliases or [],
                parent=path[:-1],
            )
            self._commands[path] = cmd_def
            return func
        return decorator

    def argument(
        self,
        *name_or_flags: str,
        **kwargs: Any,
    ) -> Callable[[CommandFunc], CommandFunc]:
        """Decorator to add an argument to the next command.

        Must be used BEFORE the @command decorator (decorators apply bottom-up).
        """
        def decorator(func: CommandFunc) -> CommandFunc:
            self._pending_arguments.append(Argument(name_or_flags, kwargs))
            return func
        return decorator

    def group(
        self,
        name: str,
        *,
        help: str = "",
        description: str = "",
    ) -> "CommandGroup":
        """Create (or describe) a command group for nested commands."""
        path = split_path(name)
        self._groups[path] = GroupDef(path[-1], help=help, description=description or help)
        return CommandGroup(self, path)

    def commands(self) -> List[str]:
        """Return the full names of all registered commands, sorted."""
        return sorted(" ".join(path) for path in self._commands)

    def build_parser(self) -> argparse.ArgumentParser:
        """Build the argument parser tree."""
        parser = argparse.ArgumentParser(
            prog=self.name,
            description=self.description,
            epilog=self.epilog,
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        if self.version:
            parser.add_argument(
                "--version", "-V",
                action="version",
                version=f"%(prog)s {self.version}",
            )

        if self.add_common_args:
            self._add_common_arguments(parser)
        parser.set_defaults(_parser=parser)

        # One subparsers action per group path, created on demand
        subparsers: Dict[Path, Any] = {}
        parsers: Dict[Path, argparse.ArgumentParser] = {(): parser}

        def ensure_group(path: Path) -> argparse.ArgumentParser:
            if path in parsers:
                return parsers[path]
            parent = ensure_group(path[:-1])
            action = subparsers.get(path[:-1])
            if action is None:
                action = parent.add_subparsers(dest=f"_cmd_{len(path) - 1}", metavar="<command>")
                subparsers[path[:-1]] = action
            info = self._groups.get(path) or GroupDef(path[-1])
            group_parser = action.add_parser(
                path[-1],
                help=info.help,
                description=info.description,
            )
            group_parser.set_defaults(_parser=group_parser)
            parsers[path] = group_parser
            return group_parser

        for path in sorted(self._commands):
            cmd_def = self._commands[path]
            parent = ensure_group(cmd_def.parent)
            action = subparsers.get(cmd_def.parent)
            if action is None:
                action = parent.add_subparsers(dest=f"_cmd_{len(cmd_def.parent)}", metavar="<command>")
                subparsers[cmd_def.parent] = action
            cmd_parser = action.add_parser(
                cmd_def.name,
                help=cmd_def.help,
                description=cmd_def.description,
                aliases=cmd_def.aliases,
            )
            self._add_command_arguments(cmd_parser, cmd_def)
            if self.add_common_args:
                self._add_common_arguments(cmd_parser, suppress_defaults=True)
            cmd_parser.set_defaults(_cmd_func=cmd_def.func, _parser=cmd_parser)

        self._parser = parser
        return parser

    def _add_common_arguments(self, parser: argparse.ArgumentParser, suppress_defaults: bool = False) -> None:
        """Add common arguments to the parser.

        Leaf parsers repeat them with suppressed defaults so a flag given
        after the command name does not get reset by the subparser.
        """
        def default(value: Any) -> Any:
            return argparse.SUPPRESS if suppress_defaults else value

        group = parser.add_argument_group("global options")
        group.add_argument("--profile", "-p", default=default(None), help="Credentials profile name")
        group.add_argument("--verbose", "-v", action="store_true", default=default(False),
                           help="Log progress messages")
        group.add_argument("--debug", action="store_true", default=default(False),
                           help="Log HTTP requests and payloads")
        group.add_argument("--quiet", "-q", action="store_true", default=default(False),
                           help="Suppress command output")
        group.add_argument("--dry-run", action="store_true", default=default(False),
                           help="Preview changes without applying them")
        group.add_argument("--output", "-o", choices=[f.value for f in OutputFormat], default=default("text"),
                           help="Output format (default: text)")
        group.add_argument("--client-id", default=default(None),
                           help="Azure AD app (client) ID; defaults from profile or env")
        group.add_argument("--tenant", default=default(None), help="Azure AD tenant (default: common)")
        group.add_argument("--token", default=default(None), help="Path to the MSAL token cache JSON")

    def _add_command_arguments(
        self,
        parser: argparse.ArgumentParser,
        cmd_def: CommandDef,
    ) -> None:
        for arg in cmd_def.arguments:
            parser.add_argument(*arg.name_or_flags, **arg.kwargs)

    def run(self, argv: Optional[Sequence[str]] = None) -> int:
        """Run the CLI application and return the exit code."""
        parser = self._parser or self.build_parser()
        args = parser.parse_args(argv)

        verbose = bool(getattr(args, "verbose", False))
        debug = bool(getattr(args, "debug", False))
        configure_logging(verbose=verbose, debug=debug)

        output_config = OutputConfig(
            format=OutputFormat(getattr(args, "output", "text")),
            verbose=verbose,
            quiet=getattr(args, "quiet", False),
        )
        args._output = OutputWriter(output_config)

        cmd_func = getattr(args, "_cmd_func", None)
        if cmd_func is None:
            getattr(args, "_parser", parser).print_help()
            return ExitCode.USAGE

        try:
            return int(cmd_func(args))
        except CLIError as e:
            return handle_error(e, verbose=verbose or debug)
        except KeyboardInterrupt:
            print("\nInterrupted.", file=sys.stderr)
            return ExitCode.INTERRUPTED
        except Exception as e:
            return handle_error(e, verbose=verbose or debug)

    def main(self, argv: Optional[Sequence[str]] = None) -> None:
        """Run the CLI and exit with the return code."""
        sys.exit(self.run(argv))


class CommandGroup:
    """A group of related commands (e.g. "spo navigation node")."""

    def __init__(self, app: CLIApp, path: Path):
        self.app = app
        self.path = path

    @property
    def name(self) -> str:
        return " ".join(self.path)

    def group(self, name: str, *, help: str = "", description: str = "") -> "CommandGroup":
        """Create a nested group below this one."""
        return self.app.group(f"{self.name} {name}", help=help, description=description)

    def command(
        self,
        name: str,
        *,
        help: str = "",
        description: str = "",
        aliases: Optional[List[str]] = None,
    ) -> Callable[[CommandFunc], CommandFunc]:
        """Decorator to register a command in this group."""
        return self.app.command(f"{self.name} {name}", help=help, description=description, aliases=aliases)

    def argument(
        self,
        *name_or_flags: str,
        **kwargs: Any,
    ) -> Callable[[CommandFunc], CommandFunc]:
        """Decorator to add an argument. Delegates to app."""
        return self.app.argument(*name_or_flags, **kwargs)
