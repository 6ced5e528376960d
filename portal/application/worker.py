"""Background execution of bulk invite jobs."""

import asyncio

import logfire

from portal.domain.model import BulkInvitePayload
from portal.domain.service import BulkInviteService
from portal.domain.value import BulkJobId
from portal.util.tasks import TaskSupervisor


class BulkJobDispatcher:
    """Starts bulk invite jobs without waiting for them."""

    def __init__(
        self, bulk_invite_service: BulkInviteService, supervisor: TaskSupervisor
    ) -> None:
        self.bulk_invite_service = bulk_invite_service
        self.supervisor = supervisor

    def dispatch(self, job_id: BulkJobId, payload: BulkInvitePayload) -> asyncio.Task:
        """Run a job in the background.

        Args:
            job_id: Job created at submission
            payload: Recipients and options captured at submission

        Returns:
            The task processing the job
        """
        task = self.supervisor.spawn(
            self.bulk_invite_service.run(job_id, payload),
            name=f"bulk-invite-{job_id}",
        )
        logfire.info(
            "Bulk job dispatched",
            job_id=str(job_id),
            running=self.supervisor.running,
        )
        return task
