# app/routers/vehicles.py
"""Customer vehicles: ownership-scoped CRUD."""

from typing import Optional
from fastapi import APIRouter, Depends
from app.dependencies import get_gateway, get_session_context
from app.exceptions import NotFoundError
from app.schemas.vehicle import VehicleIn, VehicleOut
from app.services import vehicle_service
from app.services.gateway import DataGateway
from app.services.identity_provider import SessionContext

router = APIRouter()


@router.get("/vehicles", response_model=list[VehicleOut], summary="List my vehicles (newest first)")
def list_vehicles(gateway: DataGateway = Depends(get_gateway),
                  session: Optional[SessionContext] = Depends(get_session_context)):
    return vehicle_service.list_vehicles(gateway, session)


@router.post("/vehicles", response_model=VehicleOut, status_code=201, summary="Add a vehicle")
def create_vehicle(body: VehicleIn, gateway: DataGateway = Depends(get_gateway),
                   session: Optional[SessionContext] = Depends(get_session_context)):
    return vehicle_service.create_vehicle(gateway, session, body.model_dump())


@router.get("/vehicles/{vehicle_id}", response_model=VehicleOut)
def get_vehicle(vehicle_id: str, gateway: DataGateway = Depends(get_gateway),
                session: Optional[SessionContext] = Depends(get_session_context)):
    return vehicle_service.get_vehicle(gateway, session, vehicle_id)


@router.put("/vehicles/{vehicle_id}", response_model=VehicleOut, summary="Edit a vehicle")
def update_vehicle(vehicle_id: str, body: VehicleIn, gateway: DataGateway = Depends(get_gateway),
                   session: Optional[SessionContext] = Depends(get_session_context)):
    if not vehicle_service.update_vehicle(gateway, session, vehicle_id, body.model_dump()):
        raise NotFoundError("Vehicle not found")
    return vehicle_service.get_vehicle(gateway, session, vehicle_id)


@router.delete("/vehicles/{vehicle_id}", summary="Delete a vehicle (requires ?confirm=true)")
def delete_vehicle(vehicle_id: str, confirm: bool = False, gateway: DataGateway = Depends(get_gateway),
                   session: Optional[SessionContext] = Depends(get_session_context)):
    if not vehicle_service.delete_vehicle(gateway, session, vehicle_id, confirm=confirm):
        raise NotFoundError("Vehicle not found")
    return {"status": "deleted", "id": vehicle_id}
