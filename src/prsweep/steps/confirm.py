"""Interactive confirmation before a thread is marked."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from prsweep.output import PROMPT_QUESTION

if TYPE_CHECKING:
    from collections.abc import Callable

    from prsweep.output import Reporter

logger = logging.getLogger(__name__)


class ConfirmationGate:
    """Asks ``Continue: ? (y/n)`` before each mutation unless prompts are disabled.

    Workers share one stdin, so questions are asked one at a time under a lock.
    An empty answer or ``y`` proceeds, ``n`` declines, anything else re-asks.
    End of input declines.
    """

    def __init__(self, reporter: Reporter, *, skip: bool = False, read_line: Callable[[str], str] | None = None) -> None:
        self._reporter = reporter
        self._skip = skip
        self._read_line = read_line or reporter.console.input
        self._lock = asyncio.Lock()

    async def confirm(self, notice: Callable[[], None] | None = None) -> bool:
        """Show *notice* and ask, holding the lock so each notice sits directly above its question."""
        if self._skip:
            if notice is not None:
                notice()
            return True

        async with self._lock:
            if notice is not None:
                notice()
            while True:
                try:
                    raw = await asyncio.to_thread(self._read_line, PROMPT_QUESTION)
                except EOFError:
                    logger.warning("No more input on stdin; not marking the thread")
                    return False

                answer = raw.strip().lower()
                if answer in {"", "y"}:
                    return True
                if answer == "n":
                    return False
                self._reporter.invalid_answer()
