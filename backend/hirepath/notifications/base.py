"""Notifier interface.

All sends are best-effort. Implementations return True when the message
was handed to the delivery provider and False otherwise; they must not
raise.
"""

from typing import Protocol

from hirepath.models.candidate import CandidateProfile


class Notifier(Protocol):
    """Candidate-facing notification channel."""

    async def send_offer_email(self, candidate: CandidateProfile) -> bool:
        """Send the job offer / welcome email."""
        ...

    async def send_rejection_email(self, candidate: CandidateProfile) -> bool:
        """Send the rejection email."""
        ...

    async def send_reach_out_email(self, candidate: CandidateProfile) -> bool:
        """Send the initial reach-out email."""
        ...
