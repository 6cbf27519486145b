from __future__ import annotations

from typing import Callable

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.text import Text

PromptProvider = Callable[[str], str]

STYLES = {
    "info": "cyan",
    "warning": "yellow",
    "success": "green",
    "error": "red",
    "heading": "bold",
}

console = Console(highlight=False, soft_wrap=True)
error_console = Console(stderr=True, highlight=False, soft_wrap=True)


def log(message: str, level: str = "info") -> None:
    target = error_console if level == "error" else console
    target.print(message, style=STYLES.get(level), markup=False)


def info(message: str) -> None:
    log(message, "info")


def warning(message: str) -> None:
    log(message, "warning")


def success(message: str) -> None:
    log(message, "success")


def error(message: str) -> None:
    log(message, "error")


def heading(message: str) -> None:
    log(message, "heading")


def blank() -> None:
    console.print()


def banner(title: str, level: str = "info") -> None:
    style = "blue" if level == "info" else STYLES.get(level, "blue")
    console.print()
    console.print(Panel(Text(title, justify="center"), style=style, expand=False, width=44))
    console.print()


def ask(question: str) -> str:
    try:
        return Prompt.ask(Text(question, style="yellow"), console=console, default="", show_default=False)
    except EOFError:
        return ""
