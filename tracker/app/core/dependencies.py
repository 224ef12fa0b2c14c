"""
FastAPI dependencies for the parcel API.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.app.db.session import get_db
from tracker.app.services.parcel_store import ParcelStore
from tracker.app.services.parcel_service import ParcelService


async def get_parcel_service(db: AsyncSession = Depends(get_db)) -> ParcelService:
    """
    Build a parcel service bound to the request's database session.
    """
    return ParcelService(ParcelStore(db))
