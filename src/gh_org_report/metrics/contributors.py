"""Contributor ranker.

Accumulates per-login totals across commit, pull request and issue events and
ranks them. The same ranker serves the organization scope (seeded with the
member list) and a single repository.

Totals use the fixed event weights: ``total = commits + 2 * prs + issues``.
Events without a resolvable actor still count in the calendar and repository
totals, but never appear here.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

from gh_org_report.normalize.models import ContributionEvent, EventKind, Member

logger = logging.getLogger(__name__)

IDENTICON_URL = "https://github.com/identicons/{login}.png"


class ContributorRecord(BaseModel):
    """Contribution totals for one login."""

    model_config = ConfigDict(frozen=True)

    login: str
    commits: int = Field(default=0, ge=0)
    prs: int = Field(default=0, ge=0)
    issues: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)
    avatar_url: str = ""
    is_member: bool = False


@dataclass
class _Tally:
    login: str
    avatar_url: str
    is_member: bool
    commits: int = 0
    prs: int = 0
    issues: int = 0
    total: int = 0

    def to_record(self) -> ContributorRecord:
        return ContributorRecord(
            login=self.login,
            commits=self.commits,
            prs=self.prs,
            issues=self.issues,
            total=self.total,
            avatar_url=self.avatar_url,
            is_member=self.is_member,
        )


class ContributorRanker:
    """Accumulate and rank contributors.

    Logins are kept in first-encountered order (seeded members first), which
    is the tie-break order of the ranking.

    Attributes:
        excluded: Number of events skipped by the exclusion predicate.
        unattributed: Number of events skipped for lack of an actor.
    """

    def __init__(
        self,
        members: Iterable[Member] = (),
        is_excluded: Callable[[str], bool] | None = None,
    ) -> None:
        """Initialize the ranker.

        Args:
            members: Known members; each appears in the output even with no
                activity.
            is_excluded: Optional predicate (e.g. bot detection) for logins
                that must not be ranked.
        """
        self._tallies: dict[str, _Tally] = {}
        self._is_excluded = is_excluded
        self.excluded = 0
        self.unattributed = 0

        for member in members:
            if member.login not in self._tallies:
                self._tallies[member.login] = _Tally(
                    login=member.login,
                    avatar_url=member.avatar_url or IDENTICON_URL.format(login=member.login),
                    is_member=True,
                )

    def __len__(self) -> int:
        return len(self._tallies)

    def add_event(self, event: ContributionEvent) -> None:
        """Count one event towards its actor."""
        if event.actor is None:
            self.unattributed += 1
            return
        if self._is_excluded is not None and self._is_excluded(event.actor):
            self.excluded += 1
            return

        tally = self._tallies.get(event.actor)
        if tally is None:
            tally = _Tally(
                login=event.actor,
                avatar_url=IDENTICON_URL.format(login=event.actor),
                is_member=False,
            )
            self._tallies[event.actor] = tally

        if event.kind is EventKind.COMMIT:
            tally.commits += 1
        elif event.kind is EventKind.PULL_REQUEST:
            tally.prs += 1
        else:
            tally.issues += 1
        tally.total += event.weight

    def add_events(self, events: Iterable[ContributionEvent]) -> None:
        """Count every event in events."""
        for event in events:
            self.add_event(event)

    def records(self) -> list[ContributorRecord]:
        """Full unranked mapping, in first-encountered order."""
        return [tally.to_record() for tally in self._tallies.values()]

    def ranked(self, limit: int | None = None) -> list[ContributorRecord]:
        """Records sorted by total descending, ties in first-encountered order.

        Args:
            limit: Optional cap on the number of records returned.

        Returns:
            Ranked contributor records.
        """
        ranked = sorted(self.records(), key=lambda record: record.total, reverse=True)
        if limit is not None:
            ranked = ranked[:limit]
        return ranked

    def active_count(self) -> int:
        """Number of logins with at least one counted contribution."""
        return sum(1 for tally in self._tallies.values() if tally.total > 0)


def rank_contributors(
    events: Iterable[ContributionEvent],
    members: Iterable[Member] = (),
    limit: int | None = None,
    is_excluded: Callable[[str], bool] | None = None,
) -> list[ContributorRecord]:
    """Rank contributors for one scope in a single call.

    Args:
        events: Normalized commit, pull request and issue events.
        members: Optional seed members.
        limit: Optional cap on the number of records returned.
        is_excluded: Optional predicate for logins to leave out.

    Returns:
        Ranked contributor records.
    """
    ranker = ContributorRanker(members=members, is_excluded=is_excluded)
    ranker.add_events(events)
    if ranker.unattributed or ranker.excluded:
        logger.debug(
            "Skipped %d unattributed and %d excluded events while ranking",
            ranker.unattributed,
            ranker.excluded,
        )
    return ranker.ranked(limit)
