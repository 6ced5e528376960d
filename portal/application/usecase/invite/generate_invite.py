"""Generate invite use case."""

import logfire
from pydantic import BaseModel, Field

from portal.application.usecase.base import BaseUseCase, CallerInfo
from portal.config import Settings
from portal.domain.error import (
    EmailDeliveryError,
    ExpiryNotAllowedError,
    FlowNotFoundError,
    GroupingNotAllowedError,
    InactiveAccountError,
    MultiUseNotAllowedError,
    ValidationError,
)
from portal.domain.service import (
    CreatedInvitation,
    EmailSender,
    IdentityProviderClient,
    PolicyService,
    QuotaService,
)
from portal.domain.service.email_sender import DEFAULT_INVITE_MESSAGE, format_expiration


class GenerateInviteRequest(BaseModel):
    """Request to generate one invite."""

    caller: CallerInfo
    name: str = Field(min_length=1, max_length=100)
    expiry: str = Field(min_length=1)
    single_use: bool = True
    groupings: list[str] = Field(default_factory=list)
    email_recipient: str | None = None
    email_message: str | None = None


class GenerateInviteResponse(BaseModel):
    """Generated invite."""

    invite_url: str
    invite_id: str
    email_sent: bool | None = None  # None when no recipient was given
    email_error: str | None = None


class GenerateInviteUseCase(BaseUseCase):
    """Use case for issuing a single invite, optionally emailing it."""

    def __init__(
        self,
        policy_service: PolicyService,
        quota_service: QuotaService,
        identity_provider: IdentityProviderClient,
        email_sender: EmailSender,
        settings: Settings,
    ) -> None:
        """Initialize use case.

        Args:
            policy_service: Policy domain service
            quota_service: Quota domain service
            identity_provider: authentik client
            email_sender: Email sender
            settings: Application settings
        """
        self.policy_service = policy_service
        self.quota_service = quota_service
        self.identity_provider = identity_provider
        self.email_sender = email_sender
        self.settings = settings

    async def execute(self, request: GenerateInviteRequest) -> GenerateInviteResponse:
        """Execute generate invite flow.

        Args:
            request: Generate invite request

        Returns:
            The invite link and the outcome of the optional email

        Raises:
            InactiveAccountError: If the caller's account is missing or disabled
            QuotaExceededError: If the caller has no invites left
            ExpiryNotAllowedError: If the expiry exceeds the policy maximum
            GroupingNotAllowedError: If a grouping is not offered to the caller
            MultiUseNotAllowedError: If multi-use is requested but not permitted
            FlowNotFoundError: If the enrollment flow does not exist
            IdentityProviderError: If authentik rejects the invitation
        """
        caller = request.caller
        with logfire.span(
            "generate_invite",
            owner_sub=caller.sub,
            expiry=request.expiry,
            single_use=request.single_use,
        ):
            user = await self.identity_provider.get_user_by_username(caller.username)
            if user is None or not user.is_active:
                logfire.warn(
                    "Invite refused for inactive account", username=caller.username
                )
                raise InactiveAccountError(caller.username)

            if request.email_recipient and "@" not in request.email_recipient:
                raise ValidationError(f"Invalid email: {request.email_recipient}")

            policy = self.policy_service.resolve(caller.groups)
            await self.quota_service.ensure_admission(caller.sub, policy, required=1)

            if not self.policy_service.is_expiry_allowed(policy, request.expiry):
                raise ExpiryNotAllowedError(request.expiry)
            for name in request.groupings:
                if not self.policy_service.is_grouping_allowed(policy, name):
                    raise GroupingNotAllowedError(name)
            if not request.single_use and not policy.invite.allow_multi_use:
                raise MultiUseNotAllowedError()

            flow_slug = self.settings.authentik.flow_slug
            flow = await self.identity_provider.get_flow(flow_slug)
            if flow is None:
                raise FlowNotFoundError(flow_slug)

            invite_groups = self.policy_service.expand_groupings(
                policy, request.groupings
            )
            created = await self.identity_provider.create_invitation(
                name=request.name,
                expiry=request.expiry,
                single_use=request.single_use,
                flow=flow,
                invited_by=caller.username or caller.display_name,
                fixed_data={"invite_groups": invite_groups} if invite_groups else None,
            )

            await self.quota_service.log_invite(
                owner_sub=caller.sub,
                invite_external_id=created.invitation.pk,
                expires_at=created.invitation.expires,
                group_label=", ".join(request.groupings) or None,
            )

            response = GenerateInviteResponse(
                invite_url=created.invite_url,
                invite_id=created.invitation.pk,
            )
            if request.email_recipient:
                response = await self._send_email(request, created, response)
            return response

    async def _send_email(
        self,
        request: GenerateInviteRequest,
        created: CreatedInvitation,
        response: GenerateInviteResponse,
    ) -> GenerateInviteResponse:
        # The invite exists at this point; email problems are reported, not raised
        if not self.email_sender.is_configured():
            return response.model_copy(
                update={"email_sent": False, "email_error": "Email is not configured"}
            )

        caller = request.caller
        body = self.email_sender.render_template(
            request.email_message or DEFAULT_INVITE_MESSAGE,
            inviter_name=caller.display_name or caller.username or "A user",
            expiration_display=format_expiration(created.invitation.expires),
            invite_url=created.invite_url,
        )
        try:
            sent = await self.email_sender.send(
                request.email_recipient,
                f"Invitation to join {self.settings.app_name}",
                body,
            )
        except EmailDeliveryError as e:
            logfire.warn(
                "Invite email failed", recipient=request.email_recipient, error=str(e)
            )
            return response.model_copy(
                update={"email_sent": False, "email_error": str(e)}
            )

        return response.model_copy(
            update={
                "email_sent": sent,
                "email_error": None if sent else "Email was not accepted for delivery",
            }
        )
