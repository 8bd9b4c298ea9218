# app/routers/reference.py
from typing import Optional
from fastapi import APIRouter
from app.utils.reference_data import years_descending

router = APIRouter()


@router.get("/reference/years", response_model=list[int], summary="Model years for vehicle forms")
def model_years(from_year: int = 1990, to_year: Optional[int] = None):
    return years_descending(from_year, to_year)
