from __future__ import annotations

import copy

import pytest

from src.labor_reports.labor_reports.auth.service import principal_from_claims
from src.labor_reports.labor_reports.container import build_container
from src.labor_reports.labor_reports.core import constants
from src.labor_reports.labor_reports.core.exceptions import TransactionError
from src.labor_reports.labor_reports.database.unit_of_work import WriteKind


class InMemoryDocumentStore:
    """Document store fake: batches apply to a copy and swap in only on success."""

    def __init__(self):
        self._data: dict[str, dict[str, dict]] = {}
        self.commits = 0
        self.fail_after_ops: int | None = None

    def fail_next_commit(self, after_ops: int = 0) -> None:
        """Make the next commit raise after applying ``after_ops`` writes to its scratch copy."""
        self.fail_after_ops = after_ops

    def get(self, collection, doc_id):
        doc = self._data.get(collection, {}).get(str(doc_id))
        return self._with_id(doc_id, doc) if doc is not None else None

    def find(self, collection, **equals):
        out = []
        for doc_id, doc in self._data.get(collection, {}).items():
            if all(str(doc.get(k)) == str(v) for k, v in equals.items()):
                out.append(self._with_id(doc_id, doc))
        return out

    def list_all(self, collection):
        return self.find(collection)

    def commit_batch(self, ops):
        scratch = copy.deepcopy(self._data)
        for idx, op in enumerate(ops):
            if self.fail_after_ops is not None and idx >= self.fail_after_ops:
                self.fail_after_ops = None
                raise TransactionError("Could not save changes, please retry")
            table = scratch.setdefault(op.collection, {})
            payload = {k: v for k, v in (op.data or {}).items() if k != "id"}
            if op.kind == WriteKind.SET:
                table[op.doc_id] = copy.deepcopy(payload)
            elif op.kind == WriteKind.UPDATE:
                if op.doc_id in table:
                    for k, v in payload.items():
                        if v is None:
                            table[op.doc_id].pop(k, None)
                        else:
                            table[op.doc_id][k] = copy.deepcopy(v)
            else:
                table.pop(op.doc_id, None)
        if self.fail_after_ops is not None:
            self.fail_after_ops = None
            raise TransactionError("Could not save changes, please retry")
        self._data = scratch
        self.commits += 1

    # test helpers
    def put(self, collection, doc_id, data):
        self._data.setdefault(collection, {})[doc_id] = copy.deepcopy(data)

    def count(self, collection):
        return len(self._data.get(collection, {}))

    @staticmethod
    def _with_id(doc_id, doc):
        out = copy.deepcopy(doc)
        out["id"] = str(doc_id)
        return out


def _employee(emp_id, number, first, last, *, condition="jornal", status="activo", sex="M", position="pos-1"):
    return emp_id, {
        "internalNumber": number,
        "firstName": first,
        "lastName": last,
        "condition": condition,
        "status": status,
        "sex": sex,
        "positionId": position,
        "projectId": "prj-1",
    }


def seed_catalogs(store: InMemoryDocumentStore) -> None:
    store.put(constants.POSITIONS, "pos-1", {"name": "Oficial", "code": "OF"})
    store.put(constants.POSITIONS, "pos-2", {"name": "Ayudante", "code": "AY"})
    store.put(constants.ABSENCE_TYPES, "VAC", {"name": "Vacation", "code": "VAC"})
    store.put(constants.ABSENCE_TYPES, "ENF", {"name": "Sick leave", "code": "ENF"})
    store.put(constants.ABSENCE_TYPES, "OTHER", {"name": "Not enabled", "code": "OTH"})
    store.put(constants.SPECIAL_HOUR_TYPES, "SP", {"name": "Height work", "code": "SP"})
    store.put(constants.UNPRODUCTIVE_HOUR_TYPES, "UN", {"name": "Rain", "code": "UN"})
    store.put(constants.PHASES, "ph-p", {"name": "Phase P", "pepElement": "PEP-1"})
    store.put(constants.PHASES, "ph-q", {"name": "Phase Q", "pepElement": "PEP-2"})
    store.put(
        constants.PROJECTS,
        "prj-1",
        {
            "identifier": "OB-1",
            "name": "Project One",
            "absenceTypeIds": ["VAC", "ENF"],
            "specialHourTypeIds": ["SP"],
            "unproductiveHourTypeIds": ["UN"],
            "requiresControlGestionApproval": True,
            "requiresJefeDeObraApproval": False,
        },
    )

    for emp_id, data in (
        _employee("e1", "101", "Ana", "Alvarez", sex="F"),
        _employee("e2", "102", "Bruno", "Benitez"),
        _employee("e3", "103", "Carla", "Castro", sex="F", position="pos-2"),
        _employee("e4", "104", "Dario", "Diaz"),
        _employee("e5", "105", "Eva", "Estevez", condition="mensual", sex="F"),
        _employee("ctl-1", "201", "Carl", "Control", condition="mensual"),
        _employee("pm-1", "202", "Paula", "Manager", condition="mensual", sex="F"),
    ):
        store.put(constants.EMPLOYEES, emp_id, data)

    march = {"startDate": "2026-03-01", "endDate": "2026-03-31"}
    store.put(
        constants.CREWS,
        "crew-c",
        {
            "name": "Crew C",
            "projectId": "prj-1",
            "foremanId": "e1",
            "tallymanId": "e2",
            "projectManagerId": "pm-1",
            "controlAndManagementId": "ctl-1",
            "employeeIds": ["e2", "e1"],
            "assignedPhases": [{"id": "a1", "phaseId": "ph-p", **march}],
        },
    )
    store.put(
        constants.CREWS,
        "crew-d",
        {
            "name": "Crew D",
            "projectId": "prj-1",
            "foremanId": "e3",
            "projectManagerId": "pm-1",
            "controlAndManagementId": "ctl-1",
            "employeeIds": ["e3"],
            "assignedPhases": [{"id": "a2", "phaseId": "ph-q", **march}],
        },
    )
    store.put(
        constants.CREWS,
        "crew-n",
        {
            "name": "Crew N",
            "projectId": "prj-1",
            "employeeIds": ["e1"],
            "assignedPhases": [
                {"id": "a3", "phaseId": "ph-p", "startDate": "2026-02-01", "endDate": "2026-02-28"}
            ],
        },
    )


@pytest.fixture
def store():
    s = InMemoryDocumentStore()
    seed_catalogs(s)
    return s


@pytest.fixture
def container(store):
    return build_container(store=store)


@pytest.fixture
def clerk():
    return principal_from_claims(
        user_id="u-clerk",
        email="clerk@example.com",
        employee_id="e1",
        permissions=[
            "dailyReports",
            "dailyReports.save",
            "dailyReports.notify",
            "dailyReports.addManual",
            "dailyReports.moveEmployee",
            "dailyReports.delete",
            "permissions",
            "permissions.manage",
        ],
    )


@pytest.fixture
def viewer():
    return principal_from_claims(user_id="u-view", email="view@example.com", permissions=["dailyReports", "permissions"])


@pytest.fixture
def controller_user():
    return principal_from_claims(
        user_id="u-ctl",
        email="ctl@example.com",
        employee_id="ctl-1",
        permissions=["dailyReports", "dailyReports.approveControl", "permissions", "permissions.approveHR"],
    )


@pytest.fixture
def admin():
    return principal_from_claims(user_id="u-admin", email="admin@example.com", is_superuser=True)
