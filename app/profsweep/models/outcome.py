"""Deletion outcome model.

One outcome is recorded for every SID a deletion routine was asked to
remove. ``code`` is the numeric status returned by the host, or one of
the sentinels below.
"""

from dataclasses import dataclass

# Profile vanished, is loaded, or is a system profile
SKIPPED = "skipped"
# The attempt raised instead of returning a status
EXCEPTION = "exception"

OutcomeCode = int | str


@dataclass(frozen=True, slots=True)
class DeletionOutcome:
    """Result of one profile deletion attempt.

    Attributes:
        computer: Host the deletion ran on.
        security_id: SID of the targeted profile.
        deleted: Whether the profile was removed.
        code: Zero on success, the host's status code on failure,
            or a SKIPPED / EXCEPTION sentinel.
        message: Human-readable detail.
    """

    computer: str
    security_id: str
    deleted: bool
    code: OutcomeCode
    message: str = ""

    @property
    def skipped(self) -> bool:
        """Check if the host declined to delete the profile."""
        return self.code == SKIPPED

    @property
    def failed(self) -> bool:
        """Check if the attempt failed (not deleted and not skipped)."""
        return not self.deleted and not self.skipped


def skipped_outcome(computer: str, security_id: str, message: str) -> DeletionOutcome:
    """Create an outcome for a profile the host declined to delete."""
    return DeletionOutcome(
        computer=computer,
        security_id=security_id,
        deleted=False,
        code=SKIPPED,
        message=message,
    )


def exception_outcome(computer: str, security_id: str, message: str) -> DeletionOutcome:
    """Create an outcome for an attempt that raised."""
    return DeletionOutcome(
        computer=computer,
        security_id=security_id,
        deleted=False,
        code=EXCEPTION,
        message=message,
    )
