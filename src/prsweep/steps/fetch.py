"""Fetch every unread notification, page by page."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prsweep.github_api import GitHubClient
    from prsweep.models import Notification
    from prsweep.output import Reporter

logger = logging.getLogger(__name__)


async def fetch_unread_notifications(client: GitHubClient, reporter: Reporter, page_size: int = 50) -> list[Notification]:
    """Page through unread notifications until GitHub reports no next page.

    Results keep the order GitHub returned them in. Any page failure propagates
    as :exc:`GitHubError`; there is no partial result.
    """
    notifications: list[Notification] = []
    page = 1

    reporter.fetch_started()
    while True:
        batch, has_next = await client.list_notifications(page=page, per_page=page_size)
        notifications.extend(batch)
        logger.debug("Page %d returned %d notifications", page, len(batch))
        reporter.fetch_progress(page, len(notifications))
        if not has_next:
            break
        page += 1

    reporter.fetch_finished(len(notifications))
    return notifications
