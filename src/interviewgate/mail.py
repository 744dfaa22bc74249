"""Application letters and SMTP delivery."""

from __future__ import annotations

import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formataddr
from html import escape
from typing import Protocol, runtime_checkable

import structlog

from .errors import DispatchError
from .schemas import ApplicationTarget, CandidateInfo, CandidateProfile


@dataclass(frozen=True)
class Attachment:
    filename: str
    content: bytes
    maintype: str = "text"
    subtype: str = "plain"


@dataclass(frozen=True)
class ApplicationLetter:
    """Fully composed application email."""

    to: str
    subject: str
    text_body: str
    html_body: str
    attachment: Attachment | None = None


@runtime_checkable
class MailTransport(Protocol):
    """Delivery contract used by the application dispatcher.

    Implementations raise :class:`DispatchError` when a letter cannot be
    delivered.
    """

    def send(self, letter: ApplicationLetter) -> None:
        """Deliver one letter."""


def compose_application(
    target: ApplicationTarget,
    candidate: CandidateInfo,
    attachment: Attachment | None = None,
) -> ApplicationLetter:
    role = target.job_role or "open"
    company = target.company_name or "your company"
    text_body = "\n\n".join(
        [
            f"Dear Hiring Team at {company},",
            f"I am writing to express my interest in the {role} position at your organization.",
            "Please find my resume attached for your review. I would welcome the "
            "opportunity to discuss how my skills and experience align with your team's needs.",
            "Thank you for considering my application.",
            f"Best regards,\n{candidate.name}",
        ]
    )
    html_body = "".join(f"<p>{escape(part).replace(chr(10), '<br>')}</p>" for part in text_body.split("\n\n"))
    return ApplicationLetter(
        to=target.company_email,
        subject=f"Application for {role} Position",
        text_body=text_body,
        html_body=f"<div>{html_body}</div>",
        attachment=attachment,
    )


def render_resume(profile: CandidateProfile, *, max_experience: int = 3) -> Attachment:
    """Render the resume as a plain-text attachment."""
    info = profile.personal_info
    name = (info.name if info else None) or "Candidate"
    lines = [name]
    if info:
        contact = " | ".join(value for value in (info.email, info.phone, info.location) if value)
        if contact:
            lines.append(contact)
    if profile.summary:
        lines.extend(["", "SUMMARY", profile.summary])
    if profile.skills:
        skills = [*profile.skills.technical, *profile.skills.soft, *profile.skills.languages]
        if skills:
            lines.extend(["", "SKILLS", ", ".join(skills)])
    if profile.experience:
        lines.extend(["", "EXPERIENCE"])
        for entry in profile.experience[:max_experience]:
            header = " - ".join(part for part in (entry.title, entry.company, entry.duration) if part)
            lines.append(header)
            lines.extend(f"  * {item}" for item in entry.description)
    filename = f"{name.replace(' ', '_')}_Resume.txt"
    return Attachment(filename=filename, content="\n".join(lines).encode("utf-8"))


class SMTPTransport:
    """Deliver application letters through an SMTP relay."""

    def __init__(
        self,
        *,
        host: str,
        port: int = 587,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        sender_name: str = "Interview Gate",
        sender_email: str = "no-reply@localhost",
        timeout: float = 30.0,
    ) -> None:
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._sender = formataddr((sender_name, sender_email))
        self._timeout = timeout
        self._logger = structlog.get_logger(__name__)

    def build_message(self, letter: ApplicationLetter) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self._sender
        message["To"] = letter.to
        message["Subject"] = letter.subject
        message.set_content(letter.text_body)
        message.add_alternative(letter.html_body, subtype="html")
        if letter.attachment:
            message.add_attachment(
                letter.attachment.content,
                maintype=letter.attachment.maintype,
                subtype=letter.attachment.subtype,
                filename=letter.attachment.filename,
            )
        return message

    def send(self, letter: ApplicationLetter) -> None:
        try:
            message = self.build_message(letter)
        except (ValueError, UnicodeEncodeError) as exc:
            self._logger.warning("smtp.invalid_message", to=letter.to, error=str(exc))
            raise DispatchError(f"Invalid email for {letter.to!r}: {exc}") from exc
        try:
            with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as client:
                if self._use_tls:
                    client.starttls()
                if self._username and self._password:
                    client.login(self._username, self._password)
                client.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            self._logger.warning("smtp.send_failed", to=letter.to, error=str(exc))
            raise DispatchError(f"Failed to send email to {letter.to}: {exc}") from exc


__all__ = [
    "Attachment",
    "ApplicationLetter",
    "MailTransport",
    "SMTPTransport",
    "compose_application",
    "render_resume",
]
