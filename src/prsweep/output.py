"""User-facing terminal output.

Everything the operator reads (progress, decisions, results) goes through a
:class:`Reporter` wrapping a rich ``Console``. Diagnostics and failures go to
``logging`` instead.
"""

from __future__ import annotations

from rich.console import Console

from prsweep.models import MarkAction, SweepReport

PROMPT_QUESTION = "Continue: ? (y/n): "
INVALID_ANSWER = "Invalid input, please enter 'y' or 'n', or just press Enter for yes."


class Reporter:
    """Prints progress and per-notification decisions."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(highlight=False)

    def _print(self, text: str, style: str | None = None) -> None:
        self.console.print(text, style=style, markup=False, emoji=False, soft_wrap=True)

    def fetch_started(self) -> None:
        self._print("Fetching all GitHub notifications")

    def fetch_progress(self, page: int, total: int) -> None:
        # rich strips "\r" from rendered text, so the counter goes straight to the stream.
        self.console.file.write(f"\r📦 Page {page} - Total fetched: {total} notifications")
        self.console.file.flush()

    def fetch_finished(self, total: int) -> None:
        self.console.file.write("\n")
        self._print(f"✅ Done! Fetched {total} notifications in total.")

    def pending_review(self, web_url: str, title: str) -> None:
        self._print(f'PR: {web_url}, Title: "{title}", is unmerged and waiting for your review!')

    def propose_mark(self, web_url: str, title: str, action: MarkAction) -> None:
        self._print(
            f'🟡 PR: {web_url}, Title: "{title}", is merged or closed and notification will be marked as {action}',
        )

    def about_to_mark(self, thread_id: str, action: MarkAction) -> None:
        self._print(
            f'  🟡 About to mark related GH Notification with threadID: "{thread_id}" as *{action.upper()}*',
            style="yellow",
        )

    def marked(self, action: MarkAction) -> None:
        self._print(f"    🟢 Successfully marked thread as {action}")

    def invalid_answer(self) -> None:
        self._print(INVALID_ANSWER)

    def summary(self, report: SweepReport) -> None:
        self._print(
            f"\n{report.candidates} pull request notification(s) checked: "
            f"{report.marked} marked, {report.pending} pending review, "
            f"{report.declined} declined, {report.failed} failed",
        )
