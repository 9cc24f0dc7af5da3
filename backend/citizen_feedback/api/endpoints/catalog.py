# backend/citizen_feedback/api/endpoints/catalog.py

from fastapi import APIRouter

from citizen_feedback.analytics.catalog import CANONICAL_DEPARTMENTS, FORM_DEPARTMENT_LABELS, POLICE_STATIONS

router = APIRouter(prefix="/api/catalog", tags=["Catalog"])


@router.get("/stations")
async def list_stations():
    """
    [Public] police stations offered by the feedback form, in English and Marathi.
    The English name is the value stored as policeStation.
    """
    return [{"value": s.en, "en": s.en, "mr": s.mr} for s in POLICE_STATIONS]


@router.get("/departments")
async def list_departments():
    # form labels are listed in canonical order
    return [
        {"value": name, "en": en, "mr": mr}
        for name, en, mr in zip(CANONICAL_DEPARTMENTS, FORM_DEPARTMENT_LABELS["en"], FORM_DEPARTMENT_LABELS["mr"])
    ]
