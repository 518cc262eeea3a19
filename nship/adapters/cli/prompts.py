"""
Rich-based user prompts
"""
from typing import Optional

from rich.console import Console
from rich.prompt import Prompt

from ...core.interfaces import PromptProvider
from ...core.logging import get_stderr_console


class RichPromptProvider(PromptProvider):
    """Rich-based prompt provider"""

    def __init__(self, console: Optional[Console] = None):
        # stderr keeps prompts out of piped output
        self.console = console or get_stderr_console()

    def prompt(self, message: str, default: Optional[str] = None, password: bool = False) -> str:
        if default is not None and not password:
            message = f"{message} (default: {default})"
        answer = Prompt.ask(message, default=default, password=password, console=self.console)
        return answer or ""
