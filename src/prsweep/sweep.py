"""Run a full sweep: fetch, filter, then resolve and act on each PR notification."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from prsweep.dispatcher import Dispatcher
from prsweep.models import Outcome, SweepReport
from prsweep.steps.confirm import ConfirmationGate
from prsweep.steps.decide import api_to_web_url, decide, find_thread_id
from prsweep.steps.fetch import fetch_unread_notifications
from prsweep.steps.filters import RepoFilter, filter_notifications
from prsweep.steps.mutate import mark_thread
from prsweep.steps.resolve import resolve_pull_request

if TYPE_CHECKING:
    from collections.abc import Sequence

    from prsweep.config import SweepConfig
    from prsweep.github_api import GitHubClient
    from prsweep.models import Notification
    from prsweep.output import Reporter

logger = logging.getLogger(__name__)


class NotificationProcessor:
    """Resolve, decide, confirm and mutate for a single notification.

    *all_notifications* is the full fetched set (before filtering); thread IDs
    are looked up there.
    """

    def __init__(
        self,
        config: SweepConfig,
        client: GitHubClient,
        reporter: Reporter,
        gate: ConfirmationGate,
        all_notifications: Sequence[Notification],
        report: SweepReport,
    ) -> None:
        self._config = config
        self._client = client
        self._reporter = reporter
        self._gate = gate
        self._all = all_notifications
        self._report = report

    async def process(self, notification: Notification) -> None:
        resolved = await resolve_pull_request(self._client, notification)
        if resolved is None:
            self._report.failed += 1
            return

        pr = resolved.pull_request
        web_url = api_to_web_url(notification.subject.url or "")
        outcome = decide(pr, notification)
        logger.debug("Notification %s (%s): %s", notification.id, web_url, outcome)

        if outcome is Outcome.SKIP:
            self._report.skipped += 1
            return
        if outcome is Outcome.REPORT_PENDING:
            self._report.pending += 1
            self._reporter.pending_review(web_url, pr.title)
            return

        action = self._config.mark_action
        self._report.proposed += 1
        self._reporter.propose_mark(web_url, pr.title, action)

        thread_id = find_thread_id(self._all, resolved.ref)
        if not thread_id:
            self._report.unmatched += 1
            return

        if not await self._gate.confirm(notice=lambda: self._reporter.about_to_mark(thread_id, action)):
            self._report.declined += 1
            return

        if await mark_thread(self._client, self._reporter, thread_id, action):
            self._report.marked += 1
        else:
            self._report.failed += 1


async def run_sweep(
    config: SweepConfig,
    client: GitHubClient,
    reporter: Reporter,
    *,
    gate: ConfirmationGate | None = None,
    dispatcher: Dispatcher | None = None,
) -> SweepReport:
    """Fetch, filter and process every unread PR notification.

    Raises:
        GitHubError: If listing notifications fails. Per-notification failures
            are logged and counted instead.
    """
    report = SweepReport()
    notifications = await fetch_unread_notifications(client, reporter, page_size=config.page_size)
    report.fetched = len(notifications)

    candidates = filter_notifications(notifications, RepoFilter.from_config(config))
    report.candidates = len(candidates)
    logger.info("%d of %d notifications are pull requests in scope", len(candidates), len(notifications))

    processor = NotificationProcessor(
        config,
        client,
        reporter,
        gate or ConfirmationGate(reporter, skip=config.no_prompt),
        notifications,
        report,
    )
    await (dispatcher or Dispatcher(config.concurrency)).run(candidates, processor.process)
    return report
