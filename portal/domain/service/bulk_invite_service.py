"""Bulk invite domain service."""

from uuid import uuid4

import logfire

from portal.domain.error import (
    EmailDeliveryError,
    FlowNotFoundError,
    IdentityProviderError,
    IdentityProviderUnavailableError,
)
from portal.domain.model.bulk_job import BulkInvitePayload, BulkJobRecord, BulkJobResult
from portal.domain.model.invite_log import utcnow
from portal.domain.repository import BulkJobRepository
from portal.domain.value import BulkJobId, BulkJobStatus

from .base import Service
from .email_sender import EmailSender, format_expiration
from .identity_provider import CreatedInvitation, Flow, IdentityProviderClient
from .policy_service import PolicyService
from .quota_service import QuotaService

PROGRESS_CHECKPOINT_INTERVAL = 5


class _Progress:
    """Mutable counters of a running job."""

    def __init__(self, total: int) -> None:
        self.total = total
        self.processed = 0
        self.failed = 0
        self.errors: list[str] = []

    def succeed(self) -> None:
        self.processed += 1

    def fail(self, message: str) -> None:
        self.processed += 1
        self.failed += 1
        self.errors.append(message)


class BulkInviteService(Service):
    """Domain service for asynchronous bulk invite campaigns.

    A job is created at submission and then driven to a terminal state by
    ``run``, which is meant to be executed in the background. Failures of a
    single recipient are recorded on the job; failures that make the whole
    campaign impossible end the job FAILED.
    """

    def __init__(
        self,
        bulk_job_repository: BulkJobRepository,
        policy_service: PolicyService,
        quota_service: QuotaService,
        identity_provider: IdentityProviderClient,
        email_sender: EmailSender,
        flow_slug: str,
        app_name: str,
    ) -> None:
        """Initialize bulk invite service.

        Args:
            bulk_job_repository: Bulk job repository
            policy_service: Resolves the policy captured at submission
            quota_service: Writes the invite ledger
            identity_provider: Issues invitations upstream
            email_sender: Delivers invitation emails
            flow_slug: Enrollment flow invitations are bound to
            app_name: Name used in the email subject
        """
        self.bulk_job_repository = bulk_job_repository
        self.policy_service = policy_service
        self.quota_service = quota_service
        self.identity_provider = identity_provider
        self.email_sender = email_sender
        self.flow_slug = flow_slug
        self.app_name = app_name

    @property
    def subject(self) -> str:
        return f"Invitation to join {self.app_name}"

    async def create_job(self, creator_sub: str, total: int) -> BulkJobRecord:
        """Persist a new PENDING job.

        Args:
            creator_sub: Subject of the submitting user
            total: Number of recipients

        Returns:
            The created job
        """
        job = BulkJobRecord(
            id=BulkJobId(uuid4()),
            creator_sub=creator_sub,
            status=BulkJobStatus.PENDING,
            total=total,
        )
        saved = await self.bulk_job_repository.save(job)
        logfire.info(
            "Bulk job created",
            job_id=str(saved.id),
            creator_sub=creator_sub,
            total=total,
        )
        return saved

    async def get_job(self, job_id: BulkJobId) -> BulkJobRecord | None:
        """Get a job by ID."""
        return await self.bulk_job_repository.find_by_id(job_id)

    async def jobs_for_creator(
        self, creator_sub: str, limit: int = 20
    ) -> list[BulkJobRecord]:
        """List a user's jobs, newest first."""
        return await self.bulk_job_repository.find_by_creator(creator_sub, limit=limit)

    async def run(self, job_id: BulkJobId, payload: BulkInvitePayload) -> None:
        """Process a job to completion.

        Never raises: a failure that aborts the campaign is recorded on the
        job as FAILED.

        Args:
            job_id: The job created at submission
            payload: Recipients and options captured at submission
        """
        with logfire.span(
            "bulk_invite_service.run",
            job_id=str(job_id),
            recipients=len(payload.recipients),
            single_use=payload.single_use,
        ):
            try:
                await self._process(job_id, payload)
            except Exception as e:
                logfire.error(
                    "Bulk job failed",
                    job_id=str(job_id),
                    error=str(e),
                    error_type=type(e).__name__,
                )
                await self._mark_failed(job_id, str(e))

    async def _process(self, job_id: BulkJobId, payload: BulkInvitePayload) -> None:
        job = await self.bulk_job_repository.find_by_id(job_id)
        if job is None:
            raise RuntimeError(f"Bulk job not found: {job_id}")

        progress = _Progress(total=len(payload.recipients))
        job = await self.bulk_job_repository.save(
            job.model_copy(
                update={
                    "status": BulkJobStatus.PROCESSING,
                    "total": progress.total,
                    "updated_at": utcnow(),
                }
            )
        )

        policy = self.policy_service.resolve(payload.caller_groups)
        invite_groups = self.policy_service.expand_groupings(policy, payload.groupings)

        flow = await self.identity_provider.get_flow(self.flow_slug)
        if flow is None:
            raise FlowNotFoundError(self.flow_slug)

        fixed_data = {"invite_groups": invite_groups} if invite_groups else None

        if payload.single_use:
            await self._process_single_use(job, payload, flow, fixed_data, progress)
        else:
            await self._process_multi_use(job, payload, flow, fixed_data, progress)

        # Every recipient is accounted for, even when all of them failed
        await self.bulk_job_repository.save(
            job.model_copy(
                update={
                    "status": BulkJobStatus.COMPLETED,
                    "processed": progress.total,
                    "failed": progress.failed,
                    "result": BulkJobResult(errors=progress.errors),
                    "updated_at": utcnow(),
                }
            )
        )
        logfire.info(
            "Bulk job completed",
            job_id=str(job_id),
            total=progress.total,
            failed=progress.failed,
        )

    async def _process_single_use(
        self,
        job: BulkJobRecord,
        payload: BulkInvitePayload,
        flow: Flow,
        fixed_data: dict | None,
        progress: _Progress,
    ) -> None:
        for email in payload.recipients:
            try:
                created = await self.identity_provider.create_invitation(
                    name=f"Invite for {email}",
                    expiry=payload.expiry,
                    single_use=True,
                    flow=flow,
                    invited_by=payload.username,
                    fixed_data=fixed_data,
                )
            except IdentityProviderUnavailableError:
                raise
            except IdentityProviderError as e:
                self._recipient_failed(job, progress, email, f"{email}: {e}", e)
            else:
                await self.quota_service.log_invite(
                    owner_sub=payload.owner_sub,
                    invite_external_id=created.invitation.pk,
                    expires_at=created.invitation.expires,
                    group_label=payload.group_label,
                )
                if not self.email_sender.is_configured():
                    progress.succeed()
                else:
                    try:
                        await self._deliver(email, payload, created)
                    except Exception as e:
                        # Delivery problems belong to the recipient, not the job
                        self._recipient_failed(
                            job, progress, email, f"{email}: {e}", e
                        )
                    else:
                        progress.succeed()

            if progress.processed % PROGRESS_CHECKPOINT_INTERVAL == 0:
                await self._checkpoint(job, progress)

    async def _process_multi_use(
        self,
        job: BulkJobRecord,
        payload: BulkInvitePayload,
        flow: Flow,
        fixed_data: dict | None,
        progress: _Progress,
    ) -> None:
        try:
            created = await self.identity_provider.create_invitation(
                name=f"Bulk Invite ({progress.total} recipients)",
                expiry=payload.expiry,
                single_use=False,
                flow=flow,
                invited_by=payload.username,
                fixed_data=fixed_data,
            )
        except IdentityProviderUnavailableError:
            raise
        except IdentityProviderError as e:
            logfire.warn(
                "Multi-use invite creation failed", job_id=str(job.id), error=str(e)
            )
            for _ in payload.recipients:
                progress.fail(f"Multi-use creation failed: {e}")
            return

        await self.quota_service.log_invite(
            owner_sub=payload.owner_sub,
            invite_external_id=created.invitation.pk,
            expires_at=created.invitation.expires,
            group_label=payload.group_label,
        )

        if not self.email_sender.is_configured():
            for _ in payload.recipients:
                progress.succeed()
            return

        for email in payload.recipients:
            try:
                await self._deliver(email, payload, created)
            except Exception as e:
                self._recipient_failed(
                    job, progress, email, f"{email} (Delivery): {e}", e
                )
            else:
                progress.succeed()

            if progress.processed % PROGRESS_CHECKPOINT_INTERVAL == 0:
                await self._checkpoint(job, progress)

    async def _deliver(
        self, email: str, payload: BulkInvitePayload, created: CreatedInvitation
    ) -> None:
        body = self.email_sender.render_template(
            payload.message,
            inviter_name=payload.inviter_name,
            expiration_display=format_expiration(created.invitation.expires),
            invite_url=created.invite_url,
        )
        sent = await self.email_sender.send(email, self.subject, body)
        if not sent:
            raise EmailDeliveryError("Email was not accepted for delivery")

    @staticmethod
    def _recipient_failed(
        job: BulkJobRecord,
        progress: _Progress,
        email: str,
        entry: str,
        error: Exception,
    ) -> None:
        logfire.warn(
            "Bulk invite recipient failed",
            job_id=str(job.id),
            recipient=email,
            error=str(error),
            error_type=type(error).__name__,
        )
        progress.fail(entry)

    async def _checkpoint(self, job: BulkJobRecord, progress: _Progress) -> None:
        await self.bulk_job_repository.save(
            job.model_copy(
                update={
                    "processed": progress.processed,
                    "failed": progress.failed,
                    "updated_at": utcnow(),
                }
            )
        )
        logfire.debug(
            "Bulk job progress",
            job_id=str(job.id),
            processed=progress.processed,
            failed=progress.failed,
        )

    async def _mark_failed(self, job_id: BulkJobId, error: str) -> None:
        try:
            job = await self.bulk_job_repository.find_by_id(job_id)
            if job is None:
                return
            await self.bulk_job_repository.save(
                job.model_copy(
                    update={
                        "status": BulkJobStatus.FAILED,
                        "result": BulkJobResult(error=error),
                        "updated_at": utcnow(),
                    }
                )
            )
        except Exception as e:
            logfire.error(
                "Could not record bulk job failure",
                job_id=str(job_id),
                error=str(e),
            )
