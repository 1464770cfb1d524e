"""Console output formatting."""

from rich.console import Console


class OutputFormatter:
    """Formats user-facing messages on the terminal.

    Informational messages are suppressed in quiet mode; errors are always
    written to stderr.
    """

    def __init__(self, quiet: bool = False):
        """Initialize output formatter.

        Args:
            quiet: Suppress informational output
        """
        self.quiet = quiet
        self.console = Console(highlight=False)
        self.err_console = Console(stderr=True, highlight=False)

    def print(self, message: str = "", always: bool = False) -> None:
        """Print a plain message.

        Args:
            message: Text to print
            always: Print even in quiet mode
        """
        if always or not self.quiet:
            self.console.print(message, markup=False, soft_wrap=True)

    def info(self, message: str) -> None:
        """Print an informational message."""
        if not self.quiet:
            self.console.print(message, markup=False, soft_wrap=True)

    def success(self, message: str) -> None:
        """Print a success message."""
        if not self.quiet:
            self.console.print(message, style="green", markup=False, soft_wrap=True)

    def warning(self, message: str) -> None:
        """Print a warning message."""
        if not self.quiet:
            self.console.print(message, style="yellow", markup=False, soft_wrap=True)

    def error(self, message: str) -> None:
        """Print an error message to stderr."""
        self.err_console.print(
            f"Error: {message}", style="bold red", markup=False, soft_wrap=True
        )
