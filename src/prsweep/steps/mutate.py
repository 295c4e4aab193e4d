"""Mark a notification thread as read or done."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from prsweep.github_api import GitHubError
from prsweep.models import MarkAction

if TYPE_CHECKING:
    from prsweep.github_api import GitHubClient
    from prsweep.output import Reporter

logger = logging.getLogger(__name__)


async def mark_thread(client: GitHubClient, reporter: Reporter, thread_id: str, action: MarkAction) -> bool:
    """Apply *action* to the thread and report the result.

    ``DONE`` needs a numeric thread ID; a non-numeric one is logged and the
    call is never made.

    Returns:
        True if the thread was marked.
    """
    try:
        if action is MarkAction.DONE:
            try:
                numeric_id = int(thread_id)
            except ValueError:
                logger.error("    ❌ Thread ID %r is not numeric, cannot mark it as done", thread_id)
                return False
            await client.mark_thread_done(numeric_id)
        else:
            await client.mark_thread_read(thread_id)
    except GitHubError as exc:
        logger.error("    ❌ Failed to mark thread %s as %s: %s", thread_id, action, exc)
        return False

    reporter.marked(action)
    return True
