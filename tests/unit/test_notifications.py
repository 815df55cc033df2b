"""Tests for email delivery and outbox dispatch."""

import smtplib
from unittest.mock import patch

import pytest
from freezegun import freeze_time

from housedirect.core.config import Settings
from housedirect.models.enums import JobStatus, VerificationEntityType
from housedirect.services.jobs import JobsService
from housedirect.services.notifications import EmailService, NotificationDispatcher
from tests.utils.queries import job_by_scope


def _configured_settings(**overrides) -> Settings:
    values = {
        "smtp_host": "smtp.housedirect.test",
        "smtp_port": 587,
        "smtp_user": "notifications@housedirect.test",
        "smtp_password": "secret",
    }
    values.update(overrides)
    return Settings(**values)


async def _queue(db, kind="verification_approved", params=None, scope="notify:test:1"):
    job_id = await JobsService(db).enqueue_notification(
        kind=kind,
        to="owner@housedirect.test",
        params=params if params is not None else {"entity_type": "agent", "review_notes": None},
        unique_scope=scope,
    )
    await db.commit()
    return job_id


@pytest.mark.unit
async def test_send_email_without_smtp_credentials():
    service = EmailService(settings=Settings(smtp_user=None, smtp_password=None))

    result = await service.send_email("someone@housedirect.test", "Hello", "<p>Hi</p>")

    assert result.ok is False
    assert result.error == "SMTP not configured"


@pytest.mark.unit
async def test_send_email_over_starttls():
    service = EmailService(settings=_configured_settings())

    with patch("housedirect.services.notifications.smtplib.SMTP") as smtp_cls:
        result = await service.send_verification_approved(
            "agent@housedirect.test", VerificationEntityType.AGENT
        )

    assert result.ok is True
    assert result.error is None
    client = smtp_cls.return_value
    client.starttls.assert_called_once()
    client.login.assert_called_once_with("notifications@housedirect.test", "secret")
    message = client.send_message.call_args.args[0]
    assert message["To"] == "agent@housedirect.test"
    assert message["Subject"] == "Verification Approved - Agent Account"


@pytest.mark.unit
async def test_each_send_reports_its_own_outcome():
    """A failed send does not leak its error into the next send."""
    service = EmailService(settings=_configured_settings())

    with patch("housedirect.services.notifications.smtplib.SMTP") as smtp_cls:
        smtp_cls.return_value.login.side_effect = smtplib.SMTPAuthenticationError(
            535, b"Authentication failed"
        )
        failed = await service.send_email("a@housedirect.test", "First", "<p>1</p>")

        smtp_cls.return_value.login.side_effect = None
        succeeded = await service.send_email("b@housedirect.test", "Second", "<p>2</p>")

    assert failed.ok is False
    assert "535" in failed.error
    assert succeeded.ok is True
    assert succeeded.error is None


@pytest.mark.unit
async def test_review_notes_are_escaped(email_service):
    await email_service.send_verification_rejected(
        "seller@housedirect.test",
        VerificationEntityType.PROPERTY,
        "<script>alert('x')</script> blurry scan",
    )

    html = email_service.sent[0]["html"]
    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "blurry scan" in html


@pytest.mark.unit
async def test_enqueue_is_idempotent_per_scope(db):
    jobs = JobsService(db)

    first = await jobs.enqueue_notification("document_submitted", "x@housedirect.test", {}, "notify:dup")
    second = await jobs.enqueue_notification("document_submitted", "x@housedirect.test", {}, "notify:dup")
    await db.commit()

    assert first is not None
    assert second is None
    job = await job_by_scope(db, "notify:dup")
    assert job.id == first
    assert job.payload == {"kind": "document_submitted", "to": "x@housedirect.test", "params": {}}


@pytest.mark.unit
async def test_dispatch_marks_job_completed(db, email_service):
    job_id = await _queue(db)

    result = await NotificationDispatcher(db, email_service).dispatch(job_id)

    assert result.ok is True
    job = await job_by_scope(db, "notify:test:1")
    assert job.status == JobStatus.COMPLETED
    assert job.completed_at is not None
    assert email_service.sent[0]["to"] == "owner@housedirect.test"


@pytest.mark.unit
async def test_dispatch_only_claims_pending_jobs(db, email_service):
    job_id = await _queue(db)
    dispatcher = NotificationDispatcher(db, email_service)

    await dispatcher.dispatch(job_id)
    again = await dispatcher.dispatch(job_id)

    assert again.ok is False
    assert len(email_service.sent) == 1


@pytest.mark.unit
async def test_failed_job_is_retried_then_dead_lettered(db, email_service):
    """Attempts are counted across dispatch and the scheduled retries."""
    job_id = await _queue(db)
    email_service.fail_with("Connection refused")
    dispatcher = NotificationDispatcher(db, email_service)

    await dispatcher.dispatch(job_id)
    job = await job_by_scope(db, "notify:test:1")
    assert job.status == JobStatus.PENDING
    assert job.attempts == 1

    second = await dispatcher.process_pending()
    assert second == {"processed": 1, "sent": 0, "failed": 1, "dead_lettered": 0}

    third = await dispatcher.process_pending()
    assert third == {"processed": 1, "sent": 0, "failed": 1, "dead_lettered": 1}
    assert job.status == JobStatus.DEAD_LETTER
    assert job.attempts == 3
    assert job.last_error == "Connection refused"

    assert (await dispatcher.process_pending())["processed"] == 0


@pytest.mark.unit
async def test_scheduled_retry_delivers_after_transient_failure(db, email_service):
    job_id = await _queue(db)
    email_service.fail_with("Temporary failure")
    dispatcher = NotificationDispatcher(db, email_service)
    await dispatcher.dispatch(job_id)

    email_service.succeed()
    stats = await dispatcher.process_pending()

    assert stats["sent"] == 1
    job = await job_by_scope(db, "notify:test:1")
    assert job.status == JobStatus.COMPLETED
    assert job.last_error is None
    assert len(email_service.sent) == 2


@pytest.mark.unit
async def test_unknown_notification_kind_goes_to_dead_letter(db, email_service):
    job_id = await _queue(db, kind="carrier_pigeon", params={})

    result = await NotificationDispatcher(db, email_service).dispatch(job_id)

    assert result.ok is False
    job = await job_by_scope(db, "notify:test:1")
    assert job.status == JobStatus.DEAD_LETTER
    assert "carrier_pigeon" in job.last_error
    assert email_service.sent == []


@pytest.mark.unit
async def test_job_left_processing_is_reclaimed_after_lease(db, email_service):
    """A worker that claimed a job and never recorded an outcome does not lose it."""
    with freeze_time("2026-10-19 08:00:00", real_asyncio=True):
        job_id = await _queue(db)
        await JobsService(db).claim_job(job_id)
        await db.commit()

    dispatcher = NotificationDispatcher(db, email_service)
    with freeze_time("2026-10-19 08:04:00", real_asyncio=True):
        assert (await dispatcher.process_pending())["processed"] == 0

    with freeze_time("2026-10-19 08:10:00", real_asyncio=True):
        stats = await dispatcher.process_pending()

    assert stats == {"processed": 1, "sent": 1, "failed": 0, "dead_lettered": 0}
    job = await job_by_scope(db, "notify:test:1")
    assert job.status == JobStatus.COMPLETED
    assert job.attempts == 2
    assert len(email_service.sent) == 1


@pytest.mark.unit
async def test_expired_lease_on_last_attempt_goes_to_dead_letter(db, email_service):
    with freeze_time("2026-10-19 08:00:00", real_asyncio=True):
        job_id = await _queue(db)
        job = await JobsService(db).claim_job(job_id)
        job.attempts = job.max_attempts
        await db.commit()

    with freeze_time("2026-10-19 08:10:00", real_asyncio=True):
        stats = await NotificationDispatcher(db, email_service).process_pending()

    assert stats["processed"] == 0
    job = await job_by_scope(db, "notify:test:1")
    assert job.status == JobStatus.DEAD_LETTER
    assert job.last_error == "Delivery lease expired"
    assert email_service.sent == []
