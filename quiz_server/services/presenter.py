import io
from typing import Optional, Union

from rich.console import Console
from rich.text import Text

from quiz_server.transport.base import LineConnection

Line = Union[str, Text]


class Presenter:
    """Formats output for one connection, optionally with ANSI colours."""

    def __init__(self, connection: LineConnection, colorize: bool = True):
        self.connection = connection
        self.console = Console(
            file=io.StringIO(),
            force_terminal=colorize,
            color_system="standard" if colorize else None,
            width=1000,
            highlight=False,
            markup=False,
            emoji=False,
        )

    def render(self, line: Line, style: Optional[str] = None) -> str:
        text = line if isinstance(line, Text) else Text(str(line), style=style or "")
        with self.console.capture() as capture:
            self.console.print(text, end="", soft_wrap=True)
        return capture.get()

    async def write(self, line: Line, style: Optional[str] = None) -> None:
        await self._send(self.render(line, style) + "\n")

    async def prompt(self, text: Line, style: Optional[str] = None) -> None:
        await self._send(self.render(text, style))

    async def error(self, message: str) -> None:
        await self.write(Text.assemble(("Error", "red"), ": ", (message, "red on bright_yellow")))

    async def banner(self, text: str) -> None:
        await self.write(text, "bold green")

    async def _send(self, text: str) -> None:
        # Nothing may reach a connection after it was closed
        if self.connection.closed:
            return
        await self.connection.send(text)
