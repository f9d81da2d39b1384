import abc
from typing import Optional


class LineConnection(abc.ABC):
    """Line-delimited text channel between a client and its session."""

    closed: bool = False

    @abc.abstractmethod
    async def read_line(self) -> Optional[str]:
        """Return the next line without its terminator, or None at end of input."""

    @abc.abstractmethod
    async def send(self, text: str) -> None:
        """Write raw text; raises ConnectionClosed if the peer went away."""

    @abc.abstractmethod
    async def close(self) -> None:
        ...
