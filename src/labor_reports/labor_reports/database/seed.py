"""Demo catalogs: one project, two crews, a handful of employees and types."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Dict, List

from ..core import constants
from .document_store import DocumentStore, begin

logger = logging.getLogger(__name__)


def demo_documents(today: date | None = None) -> Dict[str, List[dict]]:
    today = today or date.today()
    window_start = (today - timedelta(days=30)).isoformat()
    window_end = (today + timedelta(days=60)).isoformat()

    return {
        constants.POSITIONS: [
            {"id": "pos-oficial", "name": "Oficial", "code": "OF"},
            {"id": "pos-ayudante", "name": "Ayudante", "code": "AY"},
        ],
        constants.ABSENCE_TYPES: [
            {"id": "abs-vac", "name": "Vacaciones", "code": "VAC"},
            {"id": "abs-enf", "name": "Enfermedad", "code": "ENF"},
        ],
        constants.SPECIAL_HOUR_TYPES: [
            {"id": "sp-altura", "name": "Trabajo en altura", "code": "ALT"},
        ],
        constants.UNPRODUCTIVE_HOUR_TYPES: [
            {"id": "un-lluvia", "name": "Lluvia", "code": "LLU"},
        ],
        constants.PHASES: [
            {"id": "ph-excavacion", "name": "Excavacion", "pepElement": "PEP-001"},
            {"id": "ph-hormigonado", "name": "Hormigonado", "pepElement": "PEP-002"},
        ],
        constants.PROJECTS: [
            {
                "id": "prj-demo",
                "identifier": "OB-001",
                "name": "Obra Demo",
                "absenceTypeIds": ["abs-vac", "abs-enf"],
                "specialHourTypeIds": ["sp-altura"],
                "unproductiveHourTypeIds": ["un-lluvia"],
                "requiresControlGestionApproval": True,
                "requiresJefeDeObraApproval": True,
            }
        ],
        constants.EMPLOYEES: [
            {
                "id": "emp-garcia",
                "internalNumber": "1001",
                "firstName": "Juan",
                "lastName": "Garcia",
                "condition": "jornal",
                "status": "activo",
                "sex": "M",
                "positionId": "pos-oficial",
                "projectId": "prj-demo",
            },
            {
                "id": "emp-lopez",
                "internalNumber": "1002",
                "firstName": "Ana",
                "lastName": "Lopez",
                "condition": "jornal",
                "status": "activo",
                "sex": "F",
                "positionId": "pos-ayudante",
                "projectId": "prj-demo",
            },
            {
                "id": "emp-perez",
                "internalNumber": "1003",
                "firstName": "Luis",
                "lastName": "Perez",
                "condition": "jornal",
                "status": "activo",
                "sex": "M",
                "positionId": "pos-ayudante",
                "projectId": "prj-demo",
            },
            {
                "id": "emp-ruiz",
                "internalNumber": "2001",
                "firstName": "Marta",
                "lastName": "Ruiz",
                "condition": "mensual",
                "status": "activo",
                "sex": "F",
                "positionId": "pos-oficial",
                "projectId": "prj-demo",
            },
        ],
        constants.CREWS: [
            {
                "id": "crew-a",
                "name": "Cuadrilla A",
                "projectId": "prj-demo",
                "foremanId": "emp-garcia",
                "tallymanId": "emp-garcia",
                "projectManagerId": "emp-ruiz",
                "controlAndManagementId": "emp-ruiz",
                "employeeIds": ["emp-garcia", "emp-lopez"],
                "assignedPhases": [
                    {"id": "as-1", "phaseId": "ph-excavacion", "startDate": window_start, "endDate": window_end}
                ],
            },
            {
                "id": "crew-b",
                "name": "Cuadrilla B",
                "projectId": "prj-demo",
                "foremanId": "emp-perez",
                "tallymanId": "emp-perez",
                "projectManagerId": "emp-ruiz",
                "controlAndManagementId": "emp-ruiz",
                "employeeIds": ["emp-perez"],
                "assignedPhases": [
                    {"id": "as-2", "phaseId": "ph-hormigonado", "startDate": window_start, "endDate": window_end}
                ],
            },
        ],
    }


def seed_demo_catalogs(store: DocumentStore, *, today: date | None = None) -> int:
    """Upsert the demo catalogs in one batch. Returns the number of documents written."""

    uow = begin(store)
    for collection, docs in demo_documents(today).items():
        for doc in docs:
            data = {k: v for k, v in doc.items() if k != "id"}
            uow.set(collection, data, doc_id=doc["id"])
    uow.commit()
    logger.info("Seeded %d demo documents", len(uow.ops))
    return len(uow.ops)
