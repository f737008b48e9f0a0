"""Console input adapter."""

import click


class ClickLineReader:
    """
    Reads operator input from the terminal.

    Implements LineReader protocol. An empty answer is returned as "".
    """

    def __call__(self, prompt: str) -> str:
        return click.prompt(prompt, default="", show_default=False)
