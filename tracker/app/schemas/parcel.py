"""
Parcel Pydantic schemas.

``Parcel`` is the in-memory record the store reads and writes; the rest are
request and response models for the parcel API.
"""

from pydantic import BaseModel, Field
from typing import List

# Largest value a 64-bit INTEGER column accepts
MAX_ROW_ID = 2**63 - 1


class Parcel(BaseModel):
    """A parcel record. ``number`` is 0 until the parcel has been stored."""
    number: int = 0
    client: int
    status: str
    address: str
    created_at: str


class ParcelRegister(BaseModel):
    """Schema for registering a new parcel."""
    client: int = Field(..., ge=0, le=MAX_ROW_ID, description="Client identifier")
    address: str = Field(..., min_length=1, description="Delivery address")


class AddressUpdate(BaseModel):
    """Schema for changing a parcel's delivery address."""
    address: str = Field(..., min_length=1, description="New delivery address")


class ParcelListResponse(BaseModel):
    """Schema for a client's parcel list."""
    parcels: List[Parcel]
    total: int
