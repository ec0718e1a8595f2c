"""Use cases: Admin dashboard counters and audit log listing."""

from app.application.exchange.dtos import AnalyticsView
from app.domain.exchange.entities import AuditLog, KycStatus
from app.domain.exchange.ports import UnitOfWork

MAX_AUDIT_LOGS = 500


class GetAnalyticsUseCase:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self) -> AnalyticsView:
        with self._uow as uow:
            return AnalyticsView(
                total_users=uow.users.count(),
                total_orders=uow.orders.count(),
                pending_kyc=uow.kyc.count_by_status(KycStatus.PENDING.value),
                approved_kyc=uow.kyc.count_by_status(KycStatus.APPROVED.value),
            )


class ListAuditLogsUseCase:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self, limit: int = 100) -> list[AuditLog]:
        limit = max(1, min(limit, MAX_AUDIT_LOGS))
        with self._uow as uow:
            return uow.audit_logs.list_recent(limit)
