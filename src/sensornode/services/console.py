"""Operator console input."""

import asyncio
import getpass
import sys
import threading
from typing import Callable, Optional, TextIO


def _resolve(future: asyncio.Future, line: Optional[str], error: Optional[Exception]) -> None:
    # The awaiting task may have been cancelled while the operator was typing
    if future.done():
        return
    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(line)


class InteractiveInput:
    """Blocking line reads from the operator console.

    Each read runs on its own daemon thread and hands the line back through
    an asyncio future. The caller awaits until the operator answers (there
    is no timeout), but cancelling the caller, e.g. on Ctrl-C, returns at
    once: the blocked reader thread is abandoned, never joined.
    """

    def __init__(
        self,
        read_line: Callable[[str], str] = input,
        read_secret: Callable[[str], str] = getpass.getpass,
        output: TextIO = sys.stdout,
    ):
        self._read_line = read_line
        self._read_secret = read_secret
        self.output = output

    def say(self, message: str) -> None:
        """Print an operator-facing message."""
        print(message, file=self.output, flush=True)

    async def _read_in_thread(self, reader: Callable[[str], str], prompt: str) -> str:
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        def worker():
            try:
                line = reader(prompt)
            except Exception as e:
                callback = (_resolve, future, None, e)
            else:
                callback = (_resolve, future, line, None)
            try:
                loop.call_soon_threadsafe(*callback)
            except RuntimeError:
                # Loop already closed; nobody is waiting for this line
                pass

        threading.Thread(target=worker, name="console-read", daemon=True).start()
        return await future

    async def read_line(self, prompt: str, masked: bool = False) -> str:
        """Read one line, trimmed of surrounding whitespace.

        Args:
            prompt: Text shown before the cursor
            masked: Suppress echo (secrets)

        Raises:
            EOFError: If the console input is closed
        """
        reader = self._read_secret if masked else self._read_line
        line = await self._read_in_thread(reader, prompt)
        return line.strip()
