"""
Parcel API Endpoints.

Register parcels, look them up, advance their status and change or delete
them while they are still registered.
"""

from fastapi import APIRouter, Depends, Response, status, Path
from tracker.app.core.dependencies import get_parcel_service
from tracker.app.schemas.parcel import MAX_ROW_ID, Parcel, ParcelRegister, AddressUpdate, ParcelListResponse
from tracker.app.services.parcel_service import ParcelService

router = APIRouter(prefix="/parcels", tags=["Parcels"])
client_router = APIRouter(prefix="/clients", tags=["Parcels"])


@router.post("", response_model=Parcel, status_code=status.HTTP_201_CREATED)
async def register_parcel(
    parcel_data: ParcelRegister,
    service: ParcelService = Depends(get_parcel_service)
):
    """
    Register a new parcel for a client.
    
    The parcel starts in the 'registered' status.
    """
    return await service.register(parcel_data.client, parcel_data.address)


@router.get("/{number}", response_model=Parcel)
async def get_parcel(
    number: int = Path(..., ge=1, le=MAX_ROW_ID, description="Parcel number"),
    service: ParcelService = Depends(get_parcel_service)
):
    """Get a single parcel by number."""
    return await service.get(number)


@router.post("/{number}/next-status", response_model=Parcel)
async def advance_parcel_status(
    number: int = Path(..., ge=1, le=MAX_ROW_ID, description="Parcel number"),
    service: ParcelService = Depends(get_parcel_service)
):
    """
    Move a parcel to its next status.
    
    registered → sent → delivered. Delivered parcels are returned unchanged.
    """
    return await service.next_status(number)


@router.patch("/{number}/address", response_model=Parcel)
async def change_parcel_address(
    address_data: AddressUpdate,
    number: int = Path(..., ge=1, le=MAX_ROW_ID, description="Parcel number"),
    service: ParcelService = Depends(get_parcel_service)
):
    """
    Change the delivery address.
    
    Only allowed while the parcel is registered (409 otherwise).
    """
    return await service.change_address(number, address_data.address)


@router.delete("/{number}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_parcel(
    number: int = Path(..., ge=1, le=MAX_ROW_ID, description="Parcel number"),
    service: ParcelService = Depends(get_parcel_service)
):
    """
    Delete a parcel.
    
    Only allowed while the parcel is registered (409 otherwise).
    """
    await service.delete(number)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@client_router.get("/{client}/parcels", response_model=ParcelListResponse)
async def list_client_parcels(
    client: int = Path(..., ge=0, le=MAX_ROW_ID, description="Client ID"),
    service: ParcelService = Depends(get_parcel_service)
):
    """List every parcel of a client."""
    parcels = await service.client_parcels(client)
    return ParcelListResponse(parcels=parcels, total=len(parcels))
