# app/routers/search.py
"""Public vendor search by postal code."""

from typing import Optional
from fastapi import APIRouter, Depends
from app.dependencies import get_gateway
from app.schemas.vendor import VendorSearchResult
from app.services import catalog_service
from app.services.gateway import DataGateway

router = APIRouter()


@router.get("/search", response_model=list[VendorSearchResult],
            summary="Vendors serving a ZIP code, with their active services")
def search(zip_code: str = "", service_type: Optional[str] = None,
           gateway: DataGateway = Depends(get_gateway)):
    return catalog_service.search_by_postal_code(gateway, zip_code, service_type)
