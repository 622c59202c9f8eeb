"""
libcli host facade: route host invocations into Command.run.

The facade keeps a table of slash-command names → Command and turns every host
invocation into a fresh Tokens stream. The host's own registration mechanism is
injected as a callback, so no global command table is assumed:

    def register(name, callback):
        host.slash_commands["/" + name] = callback   # whatever the host needs

    cli = CLI("mytool", register=register, colorful=True)
    cli.add_slash_command("greet", greet, aliases=("hi",))

    # later, the host calls callback(message) for '/greet --name=Alice'

Faults never escape to the host: callbacks render them through rich on stderr,
and execute()/run() return the fault message as a plain string.
"""
import logging

from .commands import Command
from .faults import *
from .tokens import Tokens
from .utils import Unset

logger = logging.getLogger(__name__)


class CLI:
    """
    A named group of slash commands.

    Parameters
    - name: str
      program name, used in fault headers and help hints.
    - register: Callable[[str, Callable[[str], None]], object] | Unset
      host hook called once per slash-command name with a callback that runs the
      command on the host message.
    - colorful: bool
      style help and fault output.
    - fancy: bool
      render faults inside a panel.
    """

    def __init__(self, name, /, *, register=Unset, colorful=False, fancy=False):
        self.name = name
        self.commands = {}
        self.colorful = bool(colorful)
        self.fancy = bool(fancy)
        self._register = register

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r}, commands={sorted(self.commands)!r})"

    def add_slash_command(self, name, command, /, aliases=()):
        """
        Make 'command' reachable as 'name' and each of 'aliases'.

        Returns
        - self.
        """
        if not isinstance(command, Command):
            raise TypeError("add_slash_command() argument must be a command")

        for alias in (name, *aliases):
            self.commands[alias] = command
            if self._register is not Unset:
                logger.debug("registering slash command %r for %r", alias, command.name)
                self._register(alias, self._callback(command))
        return self

    def _callback(self, command):
        def callback(message="", /, *unused):
            try:
                command.run(self, Tokens(message or ""))
            except CommandException as exception:
                self.report(exception)
        return callback

    def report(self, fault, /):
        """Render a fault on stderr with this CLI's styling switches."""
        report(fault, tool=self.name, colorful=self.colorful, fancy=self.fancy)

    def dispatch(self, name, message="", /):
        """
        Run the slash command 'name' on a host message.

        Raises
        - UnknownCommandError when 'name' is not registered.
        - any fault raised by Command.run.
        """
        try:
            command = self.commands[name]
        except KeyError:
            raise UnknownCommandError(
                "unknown command %r. type '/%s help' for a list of commands." % (name, self.name),
                title="unknown command",
                code=FaultCode.UNKNOWN_COMMAND,
                input=name,
                tool=self.name,
                hint="registered commands: %s" % ", ".join(sorted(self.commands)) if self.commands else None,
            ) from None
        command.run(self, Tokens(message))

    def execute(self, name, message="", /):
        """
        Run the slash command 'name' on a host message.

        Returns
        - None on success, or the fault message.
        """
        try:
            self.dispatch(name, message)
        except CommandException as exception:
            return exception.message
        return None

    def run(self, input, /):
        """
        Run a full input line: the first token names the command.

        Returns
        - None on success, or the fault message.
        """
        tokens = Tokens(input)
        try:
            if (name := tokens.next_non_option()) is None:
                raise NoCommandError(
                    "no command specified. type '/%s help' for a list of commands." % self.name,
                    title="no command",
                    code=FaultCode.NO_COMMAND,
                    tool=self.name,
                )
            self.dispatch(name, tokens.remaining())
        except CommandException as exception:
            logger.debug("run %r failed: %s", input, exception)
            return exception.message
        return None


__all__ = (
    "CLI",
)
