from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..database.unit_of_work import UnitOfWork
from ..labor.model import LaborEntry
from .model import DailyReport


class DailyReportRepository(Protocol):
    # Reads
    def get(self, report_id: str) -> Optional[DailyReport]:
        raise NotImplementedError

    def find_for_crew(self, report_date: date, crew_id: str) -> Optional[DailyReport]:
        raise NotImplementedError

    def list_for_date(self, report_date: date) -> Sequence[DailyReport]:
        raise NotImplementedError

    def list_between(self, start: date, end: date) -> Sequence[DailyReport]:
        raise NotImplementedError

    def list_entries(self, report_id: str) -> Sequence[LaborEntry]:
        raise NotImplementedError

    # Writes are staged on a unit of work and land on commit.
    def add(self, uow: UnitOfWork, report: DailyReport) -> str:
        raise NotImplementedError

    def mark_notified(self, uow: UnitOfWork, report: DailyReport) -> None:
        raise NotImplementedError

    def record_approvals(self, uow: UnitOfWork, report: DailyReport) -> None:
        raise NotImplementedError

    def delete(self, uow: UnitOfWork, report_id: str) -> None:
        raise NotImplementedError

    def add_entry(self, uow: UnitOfWork, entry: LaborEntry) -> str:
        raise NotImplementedError

    def delete_entry(self, uow: UnitOfWork, entry_id: str) -> None:
        raise NotImplementedError
