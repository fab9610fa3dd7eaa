"""
Process exit statuses for the confapp commands.

``config set`` exits 1 when a value is rejected or the file cannot be saved,
and every command exits 1 when the configuration cannot be loaded. Usage
errors caught by Click itself keep Click's status 2.
"""

from typing import Optional

import typer


EXIT_SUCCESS = 0
EXIT_ERROR = 1


class CliExit(typer.Exit):
    """
    Stop a command with a status and an optional message.

    Messages for a non-zero status go to stderr, so ``confapp config list``
    output stays clean when piped.

    Usage:
        raise CliExit.success()
        raise CliExit.error("Unknown flag: --log.colour")
    """

    def __init__(self, code: int, message: Optional[str] = None):
        """
        Args:
            code: ``EXIT_SUCCESS`` or ``EXIT_ERROR``
            message: Printed before the command stops
        """
        self.message = message
        super().__init__(code)
        if message:
            typer.echo(message, err=code != EXIT_SUCCESS)

    @classmethod
    def success(cls, message: Optional[str] = None) -> "CliExit":
        """Finish with status 0, e.g. after ``config set`` prints its help."""
        return cls(EXIT_SUCCESS, message)

    @classmethod
    def error(cls, message: Optional[str] = None) -> "CliExit":
        """Fail with status 1 and report ``message`` on stderr."""
        return cls(EXIT_ERROR, message)
