# app/routers/vendors.py
"""
Vendor-side catalog management (/vendor/...) and public vendor pages (/vendors/{id}).
"""

from typing import Optional
from fastapi import APIRouter, Depends
from app.dependencies import get_gateway, get_session_context
from app.exceptions import NotFoundError
from app.schemas.service_listing import ServiceActiveUpdate, ServiceIn, ServiceOut
from app.schemas.vendor import (
    ServiceAreaIn, ServiceAreaOut, VendorDashboardOut, VendorDetailOut, VendorProfileIn, VendorProfileOut,
)
from app.services import catalog_service
from app.services.gateway import DataGateway
from app.services.identity_provider import SessionContext

router = APIRouter()


# ── Vendor profile ───────────────────────────────────────────────────────────

@router.post("/vendor/profile", response_model=VendorProfileOut, status_code=201,
             summary="Register as a vendor")
def create_vendor_profile(body: VendorProfileIn, gateway: DataGateway = Depends(get_gateway),
                          session: Optional[SessionContext] = Depends(get_session_context)):
    return catalog_service.create_vendor_profile(
        gateway, session,
        business_name=body.business_name,
        business_description=body.business_description or "",
        is_mobile=True if body.is_mobile is None else body.is_mobile,
        service_radius=body.service_radius,
        logo_url=body.logo_url,
    )


@router.put("/vendor/profile", response_model=VendorProfileOut)
def update_vendor_profile(body: VendorProfileIn, gateway: DataGateway = Depends(get_gateway),
                          session: Optional[SessionContext] = Depends(get_session_context)):
    return catalog_service.update_vendor_profile(gateway, session, body.model_dump(exclude_unset=True))


@router.get("/vendor/dashboard", response_model=VendorDashboardOut,
            summary="Vendor profile, services and recent bookings")
def vendor_dashboard(gateway: DataGateway = Depends(get_gateway),
                     session: Optional[SessionContext] = Depends(get_session_context)):
    return catalog_service.get_vendor_dashboard(gateway, session)


# ── Service listings ─────────────────────────────────────────────────────────

@router.get("/vendor/services", response_model=list[ServiceOut])
def list_services(gateway: DataGateway = Depends(get_gateway),
                  session: Optional[SessionContext] = Depends(get_session_context)):
    return catalog_service.list_vendor_services(gateway, session)


@router.post("/vendor/services", response_model=ServiceOut, status_code=201, summary="List a new service")
def create_service(body: ServiceIn, gateway: DataGateway = Depends(get_gateway),
                   session: Optional[SessionContext] = Depends(get_session_context)):
    return catalog_service.create_service(gateway, session, body.model_dump())


@router.put("/vendor/services/{service_id}", response_model=ServiceOut)
def update_service(service_id: str, body: ServiceIn, gateway: DataGateway = Depends(get_gateway),
                   session: Optional[SessionContext] = Depends(get_session_context)):
    changes = body.model_dump(exclude_unset=True)
    if not catalog_service.update_service(gateway, session, service_id, changes):
        raise NotFoundError("Service not found")
    return catalog_service.get_service(gateway, service_id)


@router.patch("/vendor/services/{service_id}/active", summary="Activate / deactivate a service")
def set_service_active(service_id: str, body: ServiceActiveUpdate, gateway: DataGateway = Depends(get_gateway),
                       session: Optional[SessionContext] = Depends(get_session_context)):
    if not catalog_service.set_service_active(gateway, session, service_id, body.is_active):
        raise NotFoundError("Service not found")
    return {"id": service_id, "is_active": body.is_active}


@router.delete("/vendor/services/{service_id}", summary="Delete a service (requires ?confirm=true)")
def delete_service(service_id: str, confirm: bool = False, gateway: DataGateway = Depends(get_gateway),
                   session: Optional[SessionContext] = Depends(get_session_context)):
    if not catalog_service.delete_service(gateway, session, service_id, confirm=confirm):
        raise NotFoundError("Service not found")
    return {"status": "deleted", "id": service_id}


# ── Service areas ────────────────────────────────────────────────────────────

@router.get("/vendor/service-areas", response_model=list[ServiceAreaOut])
def list_service_areas(gateway: DataGateway = Depends(get_gateway),
                       session: Optional[SessionContext] = Depends(get_session_context)):
    return catalog_service.list_service_areas(gateway, session)


@router.post("/vendor/service-areas", response_model=ServiceAreaOut, status_code=201)
def add_service_area(body: ServiceAreaIn, gateway: DataGateway = Depends(get_gateway),
                     session: Optional[SessionContext] = Depends(get_session_context)):
    return catalog_service.add_service_area(gateway, session, body.zip_code)


@router.delete("/vendor/service-areas/{zip_code}")
def remove_service_area(zip_code: str, gateway: DataGateway = Depends(get_gateway),
                        session: Optional[SessionContext] = Depends(get_session_context)):
    if not catalog_service.remove_service_area(gateway, session, zip_code):
        raise NotFoundError(f"ZIP code {zip_code} is not in your service area")
    return {"status": "removed", "zip_code": zip_code}


# ── Public vendor page ───────────────────────────────────────────────────────

@router.get("/vendors/{vendor_id}", response_model=VendorDetailOut,
            summary="Vendor details, active services and latest reviews")
def vendor_detail(vendor_id: str, gateway: DataGateway = Depends(get_gateway)):
    return catalog_service.get_vendor_detail(gateway, vendor_id)
