"""Global statistics use case."""

from portal.domain.model import GlobalStats
from portal.domain.service import QuotaService


class GetStatsUseCase:
    """Use case for portal-wide invite statistics."""

    def __init__(self, quota_service: QuotaService) -> None:
        self.quota_service = quota_service

    async def execute(self, request: None = None) -> GlobalStats:
        return await self.quota_service.global_stats()
