"""Email notifications: template rendering, SMTP delivery and outbox dispatch."""

import logging
import smtplib
from dataclasses import dataclass
from datetime import datetime
from email.message import EmailMessage
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional
from uuid import UUID

from jinja2 import Environment, FileSystemLoader, select_autoescape
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from housedirect.core.config import Settings, get_settings
from housedirect.core.errors import error_message
from housedirect.models.enums import JobStatus, VerificationEntityType
from housedirect.models.jobs import JobsOutbox
from housedirect.services.jobs import JobsService, SEND_NOTIFICATION

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates" / "email"

ENTITY_LABELS = {
    VerificationEntityType.AGENT: "Agent Account",
    VerificationEntityType.PROPERTY: "Property Listing",
}


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of one send attempt. Each call gets its own result."""

    ok: bool
    error: Optional[str] = None


class EmailTemplateRenderer:
    """Renders Jinja2-based email templates from the package templates directory."""

    def __init__(self, templates_dir: Path = TEMPLATES_DIR) -> None:
        self._env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html", "xml"]),
        )

    def render(self, template_name: str, context: dict[str, Any]) -> str:
        try:
            template = self._env.get_template(template_name)
        except Exception as exc:
            logger.error(f"[EMAIL] Template {template_name!r} not found: {exc}")
            raise
        return template.render(**context)


class EmailService:
    """SMTP email sender with one method per notification template."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        renderer: Optional[EmailTemplateRenderer] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.renderer = renderer or EmailTemplateRenderer()
        if not self.settings.smtp_configured:
            logger.warning(
                "[EMAIL] Email service not configured. Set SMTP_USER and SMTP_PASSWORD."
            )

    def _base_context(self) -> dict[str, Any]:
        return {
            "frontend_url": self.settings.frontend_url.rstrip("/"),
            "year": datetime.utcnow().year,
        }

    def _render(self, template_name: str, **context: Any) -> str:
        return self.renderer.render(template_name, {**self._base_context(), **context})

    def _deliver(self, message: EmailMessage) -> None:
        """Blocking SMTP round-trip; always run in a worker thread."""
        settings = self.settings
        if settings.smtp_port == 465:
            client = smtplib.SMTP_SSL(
                settings.smtp_host, settings.smtp_port, timeout=settings.smtp_timeout_seconds
            )
        else:
            client = smtplib.SMTP(
                settings.smtp_host, settings.smtp_port, timeout=settings.smtp_timeout_seconds
            )
        with client:
            if settings.smtp_use_tls and settings.smtp_port != 465:
                client.starttls()
            client.login(settings.smtp_user, settings.smtp_password)
            client.send_message(message)

    async def send_email(
        self,
        to: str,
        subject: str,
        html: str,
        text: Optional[str] = None,
    ) -> DeliveryResult:
        """Send one email. Never raises for delivery problems; inspect the result."""
        if not self.settings.smtp_configured:
            logger.warning(f"[EMAIL] SMTP not configured, email not sent to: {to}")
            return DeliveryResult(ok=False, error="SMTP not configured")

        message = EmailMessage()
        message["From"] = self.settings.sender_address
        message["To"] = to
        message["Subject"] = subject
        message.set_content(text or "View this email in an HTML-capable client.")
        message.add_alternative(html, subtype="html")

        try:
            await run_in_threadpool(self._deliver, message)
        except (smtplib.SMTPException, OSError) as exc:
            error = error_message(exc)
            logger.error(f"[EMAIL] Sending to {to} failed: {error}")
            return DeliveryResult(ok=False, error=error)

        logger.info(f"[EMAIL] Sent '{subject}' to {to}")
        return DeliveryResult(ok=True)

    async def send_verification_approved(
        self,
        to: str,
        entity_type: VerificationEntityType,
        review_notes: Optional[str] = None,
    ) -> DeliveryResult:
        entity_name = ENTITY_LABELS[entity_type]
        html = self._render(
            "verification_approved.html",
            entity_name=entity_name,
            owner_label="agent" if entity_type == VerificationEntityType.AGENT else "property owner",
            review_notes=review_notes,
        )
        return await self.send_email(
            to,
            f"Verification Approved - {entity_name}",
            html,
            f"Your {entity_name} has been verified and approved.",
        )

    async def send_verification_rejected(
        self,
        to: str,
        entity_type: VerificationEntityType,
        review_notes: str,
    ) -> DeliveryResult:
        entity_name = ENTITY_LABELS[entity_type]
        html = self._render(
            "verification_rejected.html",
            entity_name=entity_name,
            review_notes=review_notes,
        )
        return await self.send_email(
            to,
            f"Verification Rejected - {entity_name}",
            html,
            f"Your {entity_name} verification has been rejected. Reason: {review_notes}",
        )

    async def send_document_submitted(self, to: str, document_type: str) -> DeliveryResult:
        html = self._render("document_submitted.html", document_type=document_type)
        return await self.send_email(
            to,
            "Document Submitted for Verification",
            html,
            f"Your {document_type} has been submitted for verification.",
        )

    async def send_agent_verification_reminder(self, to: str, name: str) -> DeliveryResult:
        html = self._render("agent_reminder.html", name=name)
        return await self.send_email(
            to,
            "Complete Your Agent Verification",
            html,
            f"Hi {name}, verify your agent account to earn the verified badge and get more leads.",
        )

    async def send_seller_verification_reminder(self, to: str, name: str) -> DeliveryResult:
        html = self._render("seller_reminder.html", name=name)
        return await self.send_email(
            to,
            "Verify Your Property Listings",
            html,
            f"Hi {name}, verify your property listings to build trust with buyers.",
        )

    async def send_admin_message(
        self,
        to: str,
        recipient_name: str,
        admin_name: str,
        property_title: str,
        property_id: UUID,
        transcript: list[dict[str, Any]],
    ) -> DeliveryResult:
        """Email the admin's conversation about a property to a user."""
        chat_link = f"{self.settings.frontend_url.rstrip('/')}/messages?property={property_id}"
        html = self._render(
            "admin_message.html",
            recipient_name=recipient_name,
            admin_name=admin_name,
            property_title=property_title,
            transcript=transcript,
            chat_link=chat_link,
        )
        return await self.send_email(
            to,
            f"New Message from Admin - {property_title}",
            html,
            f"You have a new message from {admin_name} about {property_title}: {chat_link}",
        )


_email_service: Optional[EmailService] = None


def get_email_service() -> EmailService:
    """FastAPI dependency returning the process-wide EmailService."""
    global _email_service
    if _email_service is None:
        _email_service = EmailService()
    return _email_service


class NotificationDispatcher:
    """Delivers queued ``send_notification`` jobs and records the outcome."""

    def __init__(self, db: AsyncSession, email_service: EmailService):
        self.db = db
        self.email = email_service
        self.jobs = JobsService(db)
        self._handlers: dict[str, Callable[..., Awaitable[DeliveryResult]]] = {
            "verification_approved": self._verification_approved,
            "verification_rejected": self._verification_rejected,
            "document_submitted": self._document_submitted,
        }

    async def _verification_approved(self, to: str, params: dict[str, Any]) -> DeliveryResult:
        return await self.email.send_verification_approved(
            to,
            VerificationEntityType(params["entity_type"]),
            params.get("review_notes"),
        )

    async def _verification_rejected(self, to: str, params: dict[str, Any]) -> DeliveryResult:
        return await self.email.send_verification_rejected(
            to,
            VerificationEntityType(params["entity_type"]),
            params["review_notes"],
        )

    async def _document_submitted(self, to: str, params: dict[str, Any]) -> DeliveryResult:
        return await self.email.send_document_submitted(to, params["document_type"])

    async def _send(self, job: JobsOutbox) -> DeliveryResult:
        payload = job.payload or {}
        handler = self._handlers.get(payload.get("kind"))
        if handler is None:
            return DeliveryResult(ok=False, error=f"Unknown notification kind: {payload.get('kind')}")
        try:
            return await handler(payload["to"], payload.get("params") or {})
        except Exception as exc:
            logger.exception(f"[OUTBOX] Job {job.id} raised while sending")
            return DeliveryResult(ok=False, error=error_message(exc))

    async def _record(self, job: JobsOutbox, result: DeliveryResult) -> None:
        if result.ok:
            await self.jobs.complete_job(job)
            return
        unknown_kind = (job.payload or {}).get("kind") not in self._handlers
        await self.jobs.fail_job(job, result.error or "Delivery failed", dead_letter=unknown_kind)
        logger.warning(
            f"[OUTBOX] Job {job.id} failed (attempt {job.attempts}/{job.max_attempts}): "
            f"{result.error}"
        )

    async def dispatch(self, job_id: UUID) -> DeliveryResult:
        """Deliver one job right after the transaction that queued it committed."""
        job = await self.jobs.claim_job(job_id)
        if job is None:
            await self.db.commit()
            return DeliveryResult(ok=False, error="Job is not pending")
        await self.db.commit()

        result = await self._send(job)
        await self._record(job, result)
        await self.db.commit()
        return result

    async def process_pending(self, limit: int = 50) -> dict[str, int]:
        """Retry pending notification jobs; used by the scheduled endpoint."""
        jobs = await self.jobs.claim_pending_jobs(SEND_NOTIFICATION, limit=limit)
        await self.db.commit()

        stats = {"processed": 0, "sent": 0, "failed": 0, "dead_lettered": 0}
        for job in jobs:
            result = await self._send(job)
            await self._record(job, result)
            await self.db.commit()

            stats["processed"] += 1
            if result.ok:
                stats["sent"] += 1
            else:
                stats["failed"] += 1
                if job.status == JobStatus.DEAD_LETTER:
                    stats["dead_lettered"] += 1

        logger.info(f"[OUTBOX] Processed notification jobs: {stats}")
        return stats
