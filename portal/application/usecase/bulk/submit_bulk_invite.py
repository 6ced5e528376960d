"""Submit bulk invite use case."""

import re

import logfire
from pydantic import BaseModel, Field

from portal.application.usecase.base import BaseUseCase, CallerInfo
from portal.application.worker import BulkJobDispatcher
from portal.config import Settings
from portal.domain.error import (
    ExpiryNotAllowedError,
    GroupingNotAllowedError,
    MultiUseNotAllowedError,
    ValidationError,
)
from portal.domain.model import BulkInvitePayload
from portal.domain.service import BulkInviteService, PolicyService, QuotaService

RECIPIENT_SEPARATOR = re.compile(r"[\n,]")


def parse_recipients(emails: str) -> list[str]:
    """Split a pasted address list.

    Entries are separated by newlines or commas. Blank entries and entries
    without ``@`` are dropped, duplicates keep their first position.
    """
    recipients: list[str] = []
    for entry in RECIPIENT_SEPARATOR.split(emails):
        email = entry.strip()
        if email and "@" in email and email not in recipients:
            recipients.append(email)
    return recipients


class SubmitBulkInviteRequest(BaseModel):
    """Bulk invite submission."""

    caller: CallerInfo
    emails: str  # Newline or comma separated
    message: str
    expiry: str = Field(min_length=1)
    single_use: bool = True
    groupings: list[str] = Field(default_factory=list)


class SubmitBulkInviteResponse(BaseModel):
    """Accepted bulk invite submission."""

    job_id: str
    total: int


class SubmitBulkInviteUseCase(BaseUseCase):
    """Use case for admitting a bulk invite campaign.

    Everything the job needs is validated here; the job itself starts in
    the background and is observed by polling.
    """

    def __init__(
        self,
        policy_service: PolicyService,
        quota_service: QuotaService,
        bulk_invite_service: BulkInviteService,
        dispatcher: BulkJobDispatcher,
        settings: Settings,
    ) -> None:
        """Initialize use case.

        Args:
            policy_service: Policy domain service
            quota_service: Quota domain service
            bulk_invite_service: Bulk invite domain service
            dispatcher: Starts the job in the background
            settings: Application settings
        """
        self.policy_service = policy_service
        self.quota_service = quota_service
        self.bulk_invite_service = bulk_invite_service
        self.dispatcher = dispatcher
        self.settings = settings

    async def execute(
        self, request: SubmitBulkInviteRequest
    ) -> SubmitBulkInviteResponse:
        """Execute bulk invite submission.

        Args:
            request: Submission

        Returns:
            Identifier of the created job

        Raises:
            ValidationError: If no usable address was given or too many were
            QuotaExceededError: If the campaign needs more invites than remain
            ExpiryNotAllowedError: If the expiry exceeds the policy maximum
            GroupingNotAllowedError: If a grouping is not offered to the caller
            MultiUseNotAllowedError: If multi-use is requested but not permitted
        """
        caller = request.caller
        recipients = parse_recipients(request.emails)
        if not recipients:
            raise ValidationError("No valid emails provided")

        max_recipients = self.settings.bulk.max_recipients
        if len(recipients) > max_recipients:
            raise ValidationError(
                f"Too many recipients: {len(recipients)} (maximum {max_recipients})"
            )

        with logfire.span(
            "submit_bulk_invite",
            owner_sub=caller.sub,
            recipients=len(recipients),
            single_use=request.single_use,
        ):
            policy = self.policy_service.resolve(caller.groups)

            # A multi-use campaign is one invite regardless of recipients
            required = len(recipients) if request.single_use else 1
            await self.quota_service.ensure_admission(
                caller.sub, policy, required=required
            )

            if not self.policy_service.is_expiry_allowed(policy, request.expiry):
                raise ExpiryNotAllowedError(request.expiry)
            for name in request.groupings:
                if not self.policy_service.is_grouping_allowed(policy, name):
                    raise GroupingNotAllowedError(name)
            if not request.single_use and not policy.invite.allow_multi_use:
                raise MultiUseNotAllowedError()

            job = await self.bulk_invite_service.create_job(
                caller.sub, total=len(recipients)
            )
            payload = BulkInvitePayload(
                owner_sub=caller.sub,
                username=caller.username,
                display_name=caller.display_name,
                caller_groups=list(caller.groups),
                recipients=recipients,
                message=request.message,
                expiry=request.expiry,
                single_use=request.single_use,
                groupings=list(request.groupings),
            )
            self.dispatcher.dispatch(job.id, payload)

            return SubmitBulkInviteResponse(job_id=str(job.id), total=job.total)
