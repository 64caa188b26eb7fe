"""Interactive confirmation gate."""

from typing import Callable, Optional

WARNING_LINES = (
    "[bold]JFTF development environment deployment script[/bold]",
    "",
    "[bold red]WARNING!!![/bold red]",
    "[red]This script will drop and reset the JFTF database! Continue at your own RISK!!![/red]",
    "Script only to be used for development/testing purposes, not for production deployment!",
)


class ConfirmationGate:
    """Asks the operator a yes/no question until a valid answer is given."""

    QUESTION = "Do you want to start the setup process? Y(y)/N(n) "
    YES = ("y", "Y")
    NO = ("n", "N")

    def __init__(self, console, input_func: Optional[Callable[[str], str]] = None):
        self.console = console
        self.input_func = input_func or console.input

    def show_warning(self):
        self.console.print()
        for line in WARNING_LINES:
            self.console.print(line)
        self.console.print()

    def ask(self) -> bool:
        while True:
            choice = self.input_func(self.QUESTION).strip()
            if choice in self.YES:
                return True
            if choice in self.NO:
                return False
            self.console.print("Response not valid")
