from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .absences.document_repository import DocumentPermissionRepository
from .absences.service import PermissionService
from .approvals.gate import ApprovalGate
from .auth.service import Authorizer
from .catalogs.document_repository import DocumentCatalogRepository
from .catalogs.service import CatalogService
from .core.constants import DEFAULT_OVERTIME_WARNING_HOURS
from .database.connection import DBConfig, DatabaseConnection
from .database.document_store import DocumentStore, MySQLDocumentStore
from .labor.resolver import PersonnelResolver
from .labor.validator import HourAllocationValidator
from .reports.document_repository import DocumentDailyReportRepository
from .reports.guard import NotifyGuard
from .reports.service import DailyReportService
from .reports.transfer import MoveEmployeeService
from .statistics.service import StatisticsService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    store: DocumentStore

    catalogs_repo: DocumentCatalogRepository
    reports_repo: DocumentDailyReportRepository
    permissions_repo: DocumentPermissionRepository

    authorizer: Authorizer
    catalog_service: CatalogService
    daily_report_service: DailyReportService
    move_employee_service: MoveEmployeeService
    permission_service: PermissionService
    statistics_service: StatisticsService


def build_container(
    *,
    db_config: Optional[dict] = None,
    store: Optional[DocumentStore] = None,
    overtime_warning_hours: float = DEFAULT_OVERTIME_WARNING_HOURS,
) -> Container:
    conn = None
    if store is None:
        if not db_config:
            raise ValueError("db_config is required when no store is given")
        conn = DatabaseConnection(DBConfig.from_dict(db_config))
        store = MySQLDocumentStore(conn)

    catalogs_repo = DocumentCatalogRepository(store)
    reports_repo = DocumentDailyReportRepository(store)
    permissions_repo = DocumentPermissionRepository(store)

    authorizer = Authorizer()
    gate = ApprovalGate(authorizer)
    catalog_service = CatalogService(catalogs_repo)
    validator = HourAllocationValidator(overtime_warning_hours=overtime_warning_hours)

    permission_service = PermissionService(
        permissions_repo,
        catalog_service,
        store,
        authorizer=authorizer,
        gate=gate,
    )
    daily_report_service = DailyReportService(
        reports_repo,
        catalog_service,
        store,
        resolver=PersonnelResolver(reports_repo),
        linker_factory=permission_service.linker,
        validator=validator,
        authorizer=authorizer,
        gate=gate,
        guard=NotifyGuard(),
    )
    move_employee_service = MoveEmployeeService(reports_repo, catalog_service, store, authorizer=authorizer)
    statistics_service = StatisticsService(reports_repo, catalog_service, authorizer=authorizer)

    return Container(
        conn=conn,
        store=store,
        catalogs_repo=catalogs_repo,
        reports_repo=reports_repo,
        permissions_repo=permissions_repo,
        authorizer=authorizer,
        catalog_service=catalog_service,
        daily_report_service=daily_report_service,
        move_employee_service=move_employee_service,
        permission_service=permission_service,
        statistics_service=statistics_service,
    )
