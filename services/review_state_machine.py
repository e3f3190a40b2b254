"""Legal admin transitions for reports, appeals and banned users.

Report lifecycle::

    pending -> reviewing -> resolved_valid | resolved_invalid
    pending | reviewing -> appealed          (server-driven, filed by the reported user)

Appeal lifecycle (only while the report is `appealed`)::

    pending -> approved | rejected           (terminal)

Admin actions are checked here before any request is built; the server stays
authoritative and answers 409 when the record has moved on.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Literal, Optional, Tuple, Union

from use_cases.domain_models import Appeal, BannedUser, Report
from use_cases.errors import ValidationError

log = logging.getLogger(__name__)

REVIEWABLE_STATUSES: FrozenSet[str] = frozenset({"pending", "reviewing"})
REVIEW_DECISIONS: FrozenSet[str] = frozenset({"resolved_valid", "resolved_invalid"})
TERMINAL_APPEAL_STATUSES: FrozenSet[str] = frozenset({"approved", "rejected"})

SideEffect = Literal["strike_issued", "strike_reversed", "strikes_cleared", "user_unbanned"]
ActionKind = Literal["review_report", "review_appeal", "reset_strikes"]


@dataclass(frozen=True)
class ReviewReportCommand:
    report_id: str
    decision: str
    should_strike: bool = False
    notes: str = ""


@dataclass(frozen=True)
class ReviewAppealCommand:
    report_id: str
    approved: bool
    admin_response: str


@dataclass(frozen=True)
class ResetStrikesCommand:
    user_id: str
    message: str
    confirmed: bool = False


Command = Union[ReviewReportCommand, ReviewAppealCommand, ResetStrikesCommand]


@dataclass(frozen=True)
class Transition:
    """A validated admin action, ready to be submitted."""

    kind: ActionKind
    target_id: str
    payload: Dict[str, Any] = field(default_factory=dict)
    side_effects: Tuple[SideEffect, ...] = ()
    from_status: Optional[str] = None
    to_status: Optional[str] = None


def can_review_report(report: Optional[Report]) -> bool:
    return report is not None and report.status in REVIEWABLE_STATUSES


def can_review_appeal(report: Optional[Report], appeal: Optional[Appeal]) -> bool:
    if appeal is None or not appeal.is_pending:
        return False
    return report is None or report.status == "appealed"


class ReviewStateMachine:
    def validate(
        self,
        command: Command,
        *,
        report: Optional[Report] = None,
        appeal: Optional[Appeal] = None,
        banned_user: Optional[BannedUser] = None,
    ) -> Transition:
        """Single entry point: check `command` against current state or raise ValidationError."""
        if isinstance(command, ReviewReportCommand):
            return self._review_report(command, report)
        if isinstance(command, ReviewAppealCommand):
            return self._review_appeal(command, report, appeal)
        if isinstance(command, ResetStrikesCommand):
            return self._reset_strikes(command, banned_user)
        raise ValidationError("unknown_action", f"Unsupported action: {type(command).__name__}")

    def _review_report(self, command: ReviewReportCommand, report: Optional[Report]) -> Transition:
        if command.decision not in REVIEW_DECISIONS:
            raise ValidationError("invalid_decision", f"Unknown decision: {command.decision}")
        if report is None:
            raise ValidationError("unknown_report", f"Report {command.report_id} is not loaded.")
        if report.id and report.id != command.report_id:
            raise ValidationError("report_mismatch", f"Report {command.report_id} does not match the loaded report.")
        if report.status not in REVIEWABLE_STATUSES:
            raise ValidationError(
                "not_reviewable",
                f"Report {command.report_id} is {report.status}; only pending or reviewing reports can be reviewed.",
            )

        # A strike only accompanies a valid report.
        should_strike = bool(command.should_strike) and command.decision == "resolved_valid"
        return Transition(
            kind="review_report",
            target_id=command.report_id,
            payload={"status": command.decision, "notes": command.notes or "", "shouldStrike": should_strike},
            side_effects=("strike_issued",) if should_strike else (),
            from_status=report.status,
            to_status=command.decision,
        )

    def _review_appeal(
        self,
        command: ReviewAppealCommand,
        report: Optional[Report],
        appeal: Optional[Appeal],
    ) -> Transition:
        admin_response = (command.admin_response or "").strip()
        if not admin_response:
            raise ValidationError("missing_admin_response", "Please provide a response to the user.")
        if appeal is None:
            raise ValidationError("no_appeal", f"Report {command.report_id} has no appeal.")
        if appeal.report_id and appeal.report_id != command.report_id:
            raise ValidationError("report_mismatch", f"Appeal does not belong to report {command.report_id}.")
        if appeal.status in TERMINAL_APPEAL_STATUSES or not appeal.is_pending:
            raise ValidationError("appeal_resolved", f"The appeal for report {command.report_id} is already {appeal.status}.")
        if report is not None and report.status != "appealed":
            raise ValidationError(
                "not_appealed",
                f"Report {command.report_id} is {report.status}; only appealed reports take an appeal review.",
            )

        return Transition(
            kind="review_appeal",
            target_id=command.report_id,
            payload={"approved": bool(command.approved), "adminResponse": admin_response},
            side_effects=("strike_reversed",) if command.approved else (),
            from_status="pending",
            to_status="approved" if command.approved else "rejected",
        )

    def _reset_strikes(self, command: ResetStrikesCommand, banned_user: Optional[BannedUser]) -> Transition:
        message = (command.message or "").strip()
        if not message:
            raise ValidationError("missing_message", "Please provide a message for the user explaining the reset.")
        if banned_user is None or banned_user.user_id != command.user_id:
            raise ValidationError("not_banned", f"User {command.user_id} is not banned.")
        if not command.confirmed:
            raise ValidationError(
                "confirmation_required",
                f"Confirm that all strikes should be reset and user {command.user_id} unbanned.",
            )

        return Transition(
            kind="reset_strikes",
            target_id=command.user_id,
            payload={"message": message},
            side_effects=("strikes_cleared", "user_unbanned"),
            from_status="banned",
            to_status="active",
        )
