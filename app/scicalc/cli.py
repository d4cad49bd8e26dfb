"""
Console Calculator

Interactive front end for a calculator session.

Usage:
    python -m scicalc.cli
    python -m scicalc.cli "2^10"        # evaluate once and exit

Type an expression to compute it, or one of the commands below to apply
it to the current display.
"""

import sys
from pathlib import Path
from typing import Dict, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import Config, load_config
from .logging_config import setup_logging
from .preferences import AVAILABLE_THEMES, Preferences, load_preferences, save_preferences
from .session import CalculatorSession, OperationResult

# Rich console for pretty output
console = Console()

COMMANDS: Dict[str, str] = {
    "!": "factorial of the display",
    "1/x": "reciprocal of the display",
    "sq": "square of the display",
    "m+": "add the display to memory",
    "mr": "append memory to the display",
    "mc": "clear memory",
    "c": "clear the display",
    "history": "show calculation history",
    "clear-history": "forget calculation history",
    "theme <name>": f"switch theme ({', '.join(AVAILABLE_THEMES)})",
    "help": "show this list",
    "quit": "leave",
}

# Accent colours per theme
THEME_STYLES: Dict[str, Dict[str, str]] = {
    "default": {"result": "bold green", "expression": "dim", "error": "red", "memory": "cyan"},
    "dark": {"result": "bold magenta", "expression": "grey50", "error": "bold red", "memory": "blue"},
    "light": {"result": "bold blue", "expression": "grey37", "error": "red", "memory": "dark_cyan"},
}


class ConsoleCalculator:
    """
    Line-oriented calculator.

    Keeps the display text the way a keypad front end would: results
    replace it, "mr" appends to it, and errors clear it.
    """

    def __init__(self, config: Optional[Config] = None, output: Optional[Console] = None):
        self.config = config or load_config()
        self.console = output or console
        self.session = CalculatorSession(self.config)
        self.preferences_path = Path(self.config.preferences_file)
        self.preferences = load_preferences(self.preferences_path)
        self.display = ""

    @property
    def styles(self) -> Dict[str, str]:
        return THEME_STYLES[self.preferences.theme]

    def handle(self, line: str) -> bool:
        """
        Process one input line.

        Returns:
            False when the user asked to quit
        """
        command = line.strip()
        if not command:
            return True

        if command in ("quit", "exit", "q"):
            return False
        if command == "help":
            self.show_help()
        elif command == "!":
            self.show_result(self.session.factorial(self.display))
        elif command == "1/x":
            self.show_result(self.session.reciprocal(self.display))
        elif command == "sq":
            self.show_result(self.session.square(self.display))
        elif command == "m+":
            if self.session.memory_add(self.display):
                self.console.print(f"[{self.styles['memory']}]M = {self.session.memory_recall()}[/]")
        elif command == "mr":
            self.display += self.session.memory_recall()
            self.console.print(self.display)
        elif command == "mc":
            self.session.memory_clear()
            self.console.print(f"[{self.styles['memory']}]M = 0[/]")
        elif command == "c":
            self.display = ""
        elif command == "history":
            self.show_history()
        elif command == "clear-history":
            self.session.clear_history()
        elif command.startswith("theme"):
            self.change_theme(command[len("theme"):].strip())
        else:
            # Anything else is (more of) an expression
            self.display = command
            self.show_result(self.session.compute(self.display))

        return True

    def show_result(self, result: OperationResult) -> None:
        if result.success:
            self.display = result.display
            self.console.print(f"[{self.styles['expression']}]{result.expression}[/]")
            self.console.print(f"[{self.styles['result']}]= {result.result}[/]")
        else:
            self.display = ""
            self.console.print(f"[{self.styles['error']}]Error: {result.message}[/]")

    def show_history(self) -> None:
        if not self.session.history:
            self.console.print("[dim]No history[/dim]")
            return
        table = Table(title="History")
        table.add_column("Expression")
        table.add_column("Result", justify="right")
        for entry in self.session.history:
            table.add_row(entry.expression, entry.result)
        self.console.print(table)

    def show_help(self) -> None:
        table = Table(show_header=False, box=None)
        for name, description in COMMANDS.items():
            table.add_row(f"[bold]{name}[/bold]", description)
        self.console.print(table)

    def change_theme(self, theme: str) -> None:
        try:
            self.preferences = Preferences(theme=theme)
        except ValueError as e:
            self.console.print(f"[{self.styles['error']}]{e}[/]")
            return
        save_preferences(self.preferences, self.preferences_path)
        self.console.print(f"Theme set to [bold]{theme}[/bold]")

    def run(self) -> None:
        """Read-eval-print loop until quit or EOF."""
        self.console.print(Panel(
            "Type an expression, or [bold]help[/bold] for commands.",
            title="SciCalc",
        ))
        while True:
            try:
                line = self.console.input("[bold]> [/bold]")
            except (EOFError, KeyboardInterrupt):
                self.console.print()
                break
            if not self.handle(line):
                break


# === Command Line Interface ===

def main() -> None:
    """Entry point for the ``scicalc`` command."""
    config = load_config()
    setup_logging(level="WARNING", log_file=config.log_file, json_format=config.log_json)

    calculator = ConsoleCalculator(config)
    if len(sys.argv) > 1:
        result = calculator.session.compute(" ".join(sys.argv[1:]))
        calculator.show_result(result)
        sys.exit(0 if result.success else 1)

    calculator.run()


if __name__ == "__main__":
    main()
