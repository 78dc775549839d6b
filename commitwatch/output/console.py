"""Rich console presentation of sync results."""

from __future__ import annotations

import asyncio

from rich.console import Console
from rich.status import Status
from rich.style import Style
from rich.text import Text

from commitwatch.matching.models import MatchResult, RuleError, RuleOutcome

_INFO = ("[*]", "bold blue")
_WARN = ("[!]", "bold yellow")
_OK = ("[✓]", "bold green")
_FAIL = ("[✗]", "bold red")

_INDENT = "    "
_DETAIL_INDENT = "       "


def format_duration(seconds: int) -> str:
    """HH:MM:SS for a number of seconds."""
    hours, rest = divmod(max(seconds, 0), 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02}:{minutes:02}:{secs:02}"


class ConsoleSink:
    """NotificationSink that prints to the terminal.

    Commit SHAs are rendered as terminal hyperlinks to the commit page. All
    user-provided text goes through ``Text`` so brackets in commit messages or
    file names are never read as markup.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(highlight=False)

    # -- session messages --------------------------------------------------------

    def config_loaded(self, source: str | None = None) -> None:
        where = f" from {source}" if source else ""
        self.console.print(Text.assemble(_OK, f" Configuration loaded successfully{where}"))

    def empty_config(self) -> None:
        self.console.print(Text.assemble(_WARN, " No notifications found!"))

    def fatal(self, message: str) -> None:
        self.console.print(Text.assemble(_FAIL, " ", message))

    async def countdown(self, seconds: int) -> None:
        """Show a live countdown until the next cycle, then return."""
        with self.console.status(self._countdown_text(seconds), spinner="dots") as status:
            for remaining in range(seconds, 0, -1):
                status.update(self._countdown_text(remaining))
                await asyncio.sleep(1)

    def inspecting(self, label: str) -> Status:
        """Spinner shown while a cycle runs; outcome lines print above it."""
        return self.console.status(Text.assemble(_INFO, " ", label), spinner="dots")

    @staticmethod
    def _countdown_text(remaining: int) -> Text:
        return Text.assemble(("[⏰]", "bold blue"), f" Next check in {format_duration(remaining)}")

    # -- NotificationSink protocol ----------------------------------------------

    def report_outcome(self, outcome: RuleOutcome) -> None:
        uri = (outcome.repository.uri, "underline")
        if outcome.status == "baseline":
            self.console.print(
                Text.assemble(_INFO, " Repository ", uri, " has been added to the database")
            )
        elif outcome.status == "unchanged":
            self.console.print(Text.assemble(_INFO, " ", uri, (" no new commits", "dim")))
        elif outcome.status == "updated":
            plural = "commit" if outcome.new_commits == 1 else "commits"
            matched = len(outcome.matches)
            self.console.print(
                Text.assemble(
                    _INFO,
                    " ",
                    uri,
                    f" {outcome.new_commits} new {plural}, {matched} match(es)",
                )
            )

    def notify(self, result: MatchResult) -> None:
        commit = result.commit
        sha = Style(color="blue", underline=True, link=commit.html_url or None)
        self.console.print(Text.assemble(_INDENT, _WARN, " Commit SHA: ", (commit.sha, sha)))
        if commit.author_login:
            self.console.print(Text.assemble(_DETAIL_INDENT, " Author: ", (commit.author_login, "bold")))
        if result.matched_at == "message":
            summary = commit.message.splitlines()[0] if commit.message else ""
            self.console.print(Text.assemble(_DETAIL_INDENT, " Message: ", summary))
        if result.file is not None:
            self.console.print(
                Text.assemble(
                    _DETAIL_INDENT,
                    " File: ",
                    (result.file.filename, "bold white"),
                    ", Additions: ",
                    (str(result.file.additions), "underline green"),
                    ", Deletions: ",
                    (str(result.file.deletions), "underline red"),
                )
            )
        for pattern in result.patterns_matched:
            self.console.print(
                Text.assemble(_DETAIL_INDENT, " Pattern matched: ", (pattern, "bold white"))
            )

    def report_error(self, error: RuleError) -> None:
        self.console.print(
            Text.assemble(_FAIL, " ", (error.repository.uri, "underline"), ": ", error.message)
        )
