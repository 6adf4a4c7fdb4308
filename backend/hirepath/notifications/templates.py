"""Plain-text email templates."""

from dataclasses import dataclass

from hirepath.models.candidate import CandidateProfile


@dataclass(frozen=True)
class EmailContent:
    """Subject and plain-text body of an email."""

    subject: str
    text: str


def offer_email(candidate: CandidateProfile, login_url: str) -> EmailContent:
    return EmailContent(
        subject="Welcome aboard! Your offer and next steps",
        text=(
            f"Hi {candidate.first_name},\n\n"
            "Congratulations! We are excited to offer you a position as a "
            "Registered Behavior Technician.\n\n"
            "Before your first session, please sign in and complete your "
            f"onboarding tasks:\n\n{login_url}\n\n"
            "Once your onboarding tasks are done you will be asked to set up "
            "your weekly availability.\n"
        ),
    )


def rejection_email(candidate: CandidateProfile) -> EmailContent:
    return EmailContent(
        subject="Update on your application",
        text=(
            f"Hi {candidate.first_name},\n\n"
            "Thank you for your interest and the time you invested in our "
            "hiring process. After careful consideration we have decided not "
            "to move forward with your application at this time.\n\n"
            "We wish you the best in your search.\n"
        ),
    )


def reach_out_email(candidate: CandidateProfile, scheduling_url: str) -> EmailContent:
    return EmailContent(
        subject="Next steps for your RBT application",
        text=(
            f"Hi {candidate.first_name},\n\n"
            "Thanks for applying! We would like to set up an interview. "
            f"Please choose a time that works for you:\n\n{scheduling_url}\n"
        ),
    )
