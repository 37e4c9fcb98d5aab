"""Email digest of newly found jobs."""

from __future__ import annotations

import html
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import List, Sequence

from errors import NotificationError
from models import JobPosting

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = "New Upwork Jobs Alert"


def build_email_html(jobs: Sequence[JobPosting]) -> str:
    parts: List[str] = ["<h1>New Upwork Jobs Matching Your Criteria</h1>"]
    for job in jobs:
        parts.append(
            "<div>"
            f"<h2>{html.escape(job.title)}</h2>"
            f"<p>Skills: {html.escape(', '.join(job.skills))}</p>"
            f'<a href="{html.escape(job.link, quote=True)}">View Job</a>'
            "</div>"
            "<hr>"
        )
    return "\n".join(parts)


def build_email_text(jobs: Sequence[JobPosting]) -> str:
    lines = ["New Upwork Jobs Matching Your Criteria", ""]
    for job in jobs:
        lines.append(job.title)
        lines.append(f"Skills: {', '.join(job.skills)}")
        lines.append(job.link)
        lines.append("")
    return "\n".join(lines)


class EmailNotifier:
    def __init__(
        self,
        smtp_host: str,
        smtp_port: int,
        username: str,
        password: str,
        recipient: str,
        subject: str = DEFAULT_SUBJECT,
        timeout: float = 30,
    ) -> None:
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.username = username
        self.password = password
        self.recipient = recipient
        self.subject = subject
        self.timeout = timeout

    def build_message(self, jobs: Sequence[JobPosting]) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = self.subject
        msg["From"] = self.username
        msg["To"] = self.recipient

        msg.attach(MIMEText(build_email_text(jobs), "plain"))
        msg.attach(MIMEText(build_email_html(jobs), "html"))
        return msg

    def notify(self, jobs: Sequence[JobPosting]) -> None:
        if not jobs:
            return
        if not all([self.smtp_host, self.username, self.password, self.recipient]):
            raise NotificationError("Email not configured: missing SMTP settings")

        msg = self.build_message(jobs)
        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout) as server:
                server.starttls()
                server.login(self.username, self.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            raise NotificationError(f"Email send failed: {exc}") from exc
        logger.info("Email notification sent to %s (%d jobs)", self.recipient, len(jobs))
