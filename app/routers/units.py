# app/routers/units.py

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.units import Unit
from app.schemas.unit import UnitCreate, UnitResponse

router = APIRouter(
    prefix="/units",
    tags=["Units"],
)


@router.get("", response_model=list[UnitResponse])
def list_units(db: Session = Depends(get_db)):
    return db.query(Unit).order_by(Unit.id.asc()).all()


@router.post(
    "",
    response_model=UnitResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_unit(
    unit_data: UnitCreate,
    db: Session = Depends(get_db),
):
    name = unit_data.name.strip()

    if db.query(Unit).filter(Unit.name == name).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Unit with this name already exists",
        )

    unit = Unit(name=name)

    db.add(unit)
    db.commit()
    db.refresh(unit)

    return unit
