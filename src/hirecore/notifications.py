"""Interview notification events, message rendering and dispatchers."""

from __future__ import annotations

import html
from dataclasses import dataclass
from typing import Literal, Protocol, runtime_checkable

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from .schemas import InterviewSlot

EventKind = Literal["scheduled", "rescheduled", "cancelled", "confirmed", "completed"]


@dataclass(frozen=True, slots=True)
class InterviewEvent:
    """State transition published after it has been committed."""

    kind: EventKind
    interview: InterviewSlot
    reason: str | None = None


@dataclass(frozen=True, slots=True)
class Message:
    to: str
    subject: str
    html: str
    text: str


@runtime_checkable
class NotificationDispatcher(Protocol):
    """Outbound email transport; True means the message was accepted."""

    def send(self, to: str, subject: str, html: str, text: str) -> bool:
        """Send one message."""


class LoggingDispatcher:
    """Dispatcher that only records messages in the log."""

    def __init__(self) -> None:
        self._logger = structlog.get_logger(__name__)

    def send(self, to: str, subject: str, html: str, text: str) -> bool:
        self._logger.info("notification.logged", to=to, subject=subject)
        return True


class SESNotificationDispatcher:
    """Send email through Amazon SES."""

    def __init__(self, sender: str, *, region: str = "us-east-1", client=None) -> None:
        self._sender = sender
        self._client = client or boto3.client("ses", region_name=region)
        self._logger = structlog.get_logger(__name__)

    def send(self, to: str, subject: str, html: str, text: str) -> bool:
        try:
            self._client.send_email(
                Source=self._sender,
                Destination={"ToAddresses": [to]},
                Message={
                    "Subject": {"Data": subject},
                    "Body": {"Text": {"Data": text}, "Html": {"Data": html}},
                },
            )
        except (BotoCoreError, ClientError) as exc:
            self._logger.warning("notification.ses_error", to=to, error=str(exc))
            return False
        return True


class InterviewNotifier:
    """Turn interview events into messages for both participants."""

    def __init__(self, dispatcher: NotificationDispatcher, *, team_name: str = "The Hiring Team"):
        self._dispatcher = dispatcher
        self._team_name = team_name
        self._logger = structlog.get_logger(__name__)

    def publish(self, event: InterviewEvent) -> bool:
        """Send every message for the event; returns False if any failed.

        Dispatcher errors are logged per message and never propagate.
        """
        delivered = True
        for message in self.render(event):
            try:
                sent = self._dispatcher.send(message.to, message.subject, message.html, message.text)
            except Exception as exc:
                self._logger.warning(
                    "notification.failed",
                    interview_id=event.interview.id,
                    event=event.kind,
                    to=message.to,
                    error=str(exc),
                )
                delivered = False
                continue
            if not sent:
                self._logger.warning(
                    "notification.failed",
                    interview_id=event.interview.id,
                    event=event.kind,
                    to=message.to,
                )
                delivered = False
        return delivered

    def render(self, event: InterviewEvent) -> list[Message]:
        interview = event.interview
        if event.kind == "scheduled":
            return [self._invitation(interview), self._interviewer_notice(interview)]
        if event.kind == "rescheduled":
            return self._to_both(interview, "Interview Rescheduled", self._reschedule_body(interview))
        if event.kind == "cancelled":
            return self._to_both(
                interview, "Interview Cancelled", self._cancellation_body(interview, event.reason)
            )
        return []

    def _invitation(self, interview: InterviewSlot) -> Message:
        lines = [
            f"Dear {interview.candidate.name},",
            "We are pleased to invite you for an interview regarding your application.",
            *self._detail_lines(interview),
            "Please confirm your attendance by replying to this email.",
        ]
        return self._message(
            interview.candidate.email,
            f"Interview Invitation: {interview.candidate.name}",
            "Interview Invitation",
            lines,
        )

    def _interviewer_notice(self, interview: InterviewSlot) -> Message:
        lines = [
            f"Dear {interview.interviewer.name},",
            "An interview has been scheduled with the following candidate:",
            f"Candidate: {interview.candidate.name} <{interview.candidate.email}>",
            *self._detail_lines(interview),
            "Please add this to your calendar and prepare accordingly.",
        ]
        return self._message(
            interview.interviewer.email,
            f"Interview Scheduled: {interview.candidate.name}",
            "Interview Scheduled",
            lines,
        )

    def _reschedule_body(self, interview: InterviewSlot) -> list[str]:
        lines = ["Your interview has been rescheduled to the following time:"]
        lines.extend(self._detail_lines(interview))
        if interview.notes:
            lines.append(f"Note: {interview.notes}")
        lines.append("Please update your calendar accordingly.")
        return lines

    @staticmethod
    def _cancellation_body(interview: InterviewSlot, reason: str | None) -> list[str]:
        lines = [
            "We regret to inform you that the scheduled interview has been cancelled.",
            f"Original date: {interview.scheduled_time:%A, %B %d, %Y}",
            f"Original time: {interview.scheduled_time:%H:%M %Z}",
        ]
        if reason:
            lines.append(f"Reason: {reason}")
        lines.append("We apologize for any inconvenience caused.")
        return lines

    def _to_both(self, interview: InterviewSlot, heading: str, lines: list[str]) -> list[Message]:
        subject = f"{heading}: {interview.candidate.name}"
        return [
            self._message(interview.candidate.email, subject, heading, lines),
            self._message(interview.interviewer.email, subject, heading, lines),
        ]

    @staticmethod
    def _detail_lines(interview: InterviewSlot) -> list[str]:
        lines = [
            f"Date: {interview.scheduled_time:%A, %B %d, %Y}",
            f"Time: {interview.scheduled_time:%H:%M %Z}",
            f"Duration: {interview.duration} minutes",
            f"Type: {interview.type}",
        ]
        if interview.type == "video":
            lines.append(f"Meeting Link: {interview.meeting_link or 'Will be provided separately'}")
        elif interview.type == "in-person":
            lines.append(f"Location: {interview.location or 'To be confirmed'}")
        else:
            lines.append("Format: Phone interview - you will be contacted at the scheduled time")
        return lines

    def _message(self, to: str, subject: str, heading: str, lines: list[str]) -> Message:
        signature = f"Best regards,\n{self._team_name}"
        text = "\n\n".join([heading, *lines, signature])
        body = "".join(f"<p>{html.escape(line)}</p>" for line in lines)
        markup = (
            f"<h2>{html.escape(heading)}</h2>{body}"
            f"<p>Best regards,<br>{html.escape(self._team_name)}</p>"
        )
        return Message(to=to, subject=subject, html=markup, text=text)
