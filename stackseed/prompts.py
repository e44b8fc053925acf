"""Interactive prompts.

Thin wrapper over :mod:`rich.prompt` so the orchestrator can be driven by a
scripted answer source in tests.  Ctrl-C or end-of-input at any prompt is
reported as :class:`PromptCancelled`.
"""

from __future__ import annotations

from rich.console import Console
from rich.prompt import Confirm, Prompt

from .utils import console as default_console


class PromptCancelled(Exception):
    """Raised when the user aborts an interactive prompt."""

    def __init__(self, message: str = "Operation cancelled.") -> None:
        super().__init__(message)


class Prompter:
    """Asks the user for text, secret and yes/no answers."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or default_console

    def text(self, message: str, default: str | None = None) -> str:
        """Ask for a non-empty line of text."""
        while True:
            try:
                if default is None:
                    answer = Prompt.ask(message, console=self.console)
                else:
                    answer = Prompt.ask(message, console=self.console, default=default)
            except (KeyboardInterrupt, EOFError) as exc:
                raise PromptCancelled() from exc
            answer = answer.strip()
            if answer:
                return answer
            self.console.print("[prompt.invalid]Please enter a value")

    def secret(self, message: str) -> str:
        """Ask for a non-empty value without echoing it."""
        while True:
            try:
                answer = Prompt.ask(message, console=self.console, password=True)
            except (KeyboardInterrupt, EOFError) as exc:
                raise PromptCancelled() from exc
            if answer:
                return answer
            self.console.print("[prompt.invalid]Please enter a value")

    def confirm(self, message: str, default: bool = True) -> bool:
        """Ask a yes/no question."""
        try:
            return Confirm.ask(message, console=self.console, default=default)
        except (KeyboardInterrupt, EOFError) as exc:
            raise PromptCancelled() from exc
