"""Terminal prompts rendered with rich.

Ctrl-C or end of input at any prompt raises Cancelled, which the CLI turns
into exit status 130.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from contextlib import contextmanager
from typing import TypeVar

from rich.console import Console
from rich.markdown import Markdown
from rich.prompt import Confirm, Prompt

from koshi.exceptions import Cancelled

T = TypeVar("T")


class RichInteraction:
    """InteractionSurface implementation for an interactive terminal."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def _ask(self, prompt: Callable[[], T]) -> T:
        try:
            return prompt()
        except (KeyboardInterrupt, EOFError):
            self.console.print()
            raise Cancelled() from None

    def confirm(self, prompt: str, *, default: bool) -> bool:
        return self._ask(lambda: Confirm.ask(prompt, default=default, console=self.console))

    def prompt_text(self, placeholder: str) -> str:
        return self._ask(
            lambda: Prompt.ask(
                f"[dim]{placeholder}[/dim]",
                default="",
                show_default=False,
                console=self.console,
            )
        )

    def multi_select(
        self,
        header: str,
        options: Sequence[str],
        *,
        preselected: Iterable[str] = (),
        max_picks: int,
    ) -> list[str]:
        """Pick up to max_picks options by number, in the order typed.

        An empty answer keeps the preselected options.
        """
        checked = [option for option in preselected if option in options]
        self.console.print(f"[bold]{header}[/bold]")
        for index, option in enumerate(options, start=1):
            mark = "[green]x[/green]" if option in checked else " "
            self.console.print(f"  [{mark}] {index}. {option}")

        while True:
            answer = self._ask(
                lambda: Prompt.ask(
                    f"numbers separated by spaces, at most {max_picks}",
                    default="",
                    show_default=False,
                    console=self.console,
                )
            )
            if not answer.strip():
                return checked[:max_picks]
            picked = parse_selection(answer, options)
            if picked is None:
                self.console.print("[red]Please enter numbers from the list.[/red]")
            elif len(picked) > max_picks:
                self.console.print(f"[red]Select at most {max_picks}.[/red]")
            else:
                return picked

    def show_description(self, title: str, text: str) -> None:
        self.console.print(f"{title}\n")
        self.console.print(Markdown(text))
        self.console.print()

    def show_text(self, text: str) -> None:
        self.console.print(text, markup=False, highlight=False)

    @contextmanager
    def spinner(self, title: str) -> Iterator[object]:
        with self.console.status(title) as status:
            yield status


def parse_selection(answer: str, options: Sequence[str]) -> list[str] | None:
    """Map typed option numbers to options, dropping repeats.

    Returns None if any token is not a valid option number.
    """
    picked: list[str] = []
    for token in answer.replace(",", " ").split():
        if not token.isdigit() or not 1 <= int(token) <= len(options):
            return None
        option = options[int(token) - 1]
        if option not in picked:
            picked.append(option)
    return picked
