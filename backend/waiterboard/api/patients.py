from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from waiterboard.db.database import get_db_session
from waiterboard.models.patient import Patient
from waiterboard.rate_limiter import limiter
from waiterboard.repositories.patient import PatientRepository
from waiterboard.schemas.patient import PatientCreate, PatientRead, PatientSearchResult

router = APIRouter()


@router.get("/search", response_model=PatientSearchResult)
@limiter.limit("120/minute")
async def search_patient(
    request: Request,
    mrn: Optional[str] = Query(None, max_length=64),
    db: AsyncSession = Depends(get_db_session),
):
    """
    Exact MRN lookup used to pre-fill the entry form.
    """
    if not mrn or not mrn.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="MRN is required")

    repo = PatientRepository(db)
    patient = await repo.get_by_mrn(mrn.strip())
    if patient is None:
        return PatientSearchResult(found=False)
    return PatientSearchResult(found=True, patient=PatientRead.model_validate(patient))


@router.get("", response_model=List[PatientRead])
async def list_patients(db: AsyncSession = Depends(get_db_session)):
    repo = PatientRepository(db)
    return await repo.get_all_ordered()


@router.post("", response_model=PatientRead, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
async def create_patient(
    request: Request,
    patient_in: PatientCreate,
    db: AsyncSession = Depends(get_db_session),
):
    repo = PatientRepository(db)

    existing = await repo.get_by_mrn(patient_in.mrn)
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A patient with this MRN already exists."
        )

    patient = await repo.create(Patient(**patient_in.model_dump()))
    await db.commit()
    return patient
