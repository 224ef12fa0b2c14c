"""
Parcel workflow service.

Registers parcels, moves them along their status flow and turns the store's
silent no-ops into errors a caller can act on.
"""

import logging
from datetime import datetime, timezone
from typing import List
from sqlalchemy.exc import NoResultFound

from tracker.app.core.exceptions import ResourceNotFoundError, ParcelNotRegisteredError
from tracker.app.models.parcel_enums import ParcelStatus, NEXT_STATUS
from tracker.app.schemas.parcel import Parcel
from tracker.app.services.parcel_store import ParcelStore

logger = logging.getLogger("tracker.parcels")


def utc_timestamp() -> str:
    """Current UTC time as an RFC3339 string with second precision."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class ParcelService:
    """Parcel operations built on a ParcelStore."""

    def __init__(self, store: ParcelStore):
        self.store = store

    async def register(self, client: int, address: str) -> Parcel:
        """
        Register a new parcel for a client.

        Returns:
            The stored parcel, including its assigned number
        """
        parcel = Parcel(
            client=client,
            status=ParcelStatus.REGISTERED.value,
            address=address,
            created_at=utc_timestamp(),
        )
        parcel.number = await self.store.add(parcel)

        logger.info("Registered parcel %d for client %d", parcel.number, client)
        return parcel

    async def get(self, number: int) -> Parcel:
        try:
            return await self.store.get(number)
        except NoResultFound as exc:
            raise ResourceNotFoundError("Parcel", number) from exc

    async def client_parcels(self, client: int) -> List[Parcel]:
        return await self.store.get_by_client(client)

    async def next_status(self, number: int) -> Parcel:
        """
        Move a parcel to the next status in its flow.

        A delivered parcel has nowhere to go and is returned unchanged.

        Raises:
            ResourceNotFoundError: If the parcel does not exist
        """
        parcel = await self.get(number)

        next_status = NEXT_STATUS.get(parcel.status)
        if next_status is None:
            logger.info("Parcel %d is '%s', status unchanged", number, parcel.status)
            return parcel

        if not await self.store.set_status(number, next_status):
            # Deleted between the read and the update
            raise ResourceNotFoundError("Parcel", number)
        logger.info("Parcel %d has a new status: %s", number, next_status)

        return parcel.model_copy(update={"status": next_status})

    async def change_address(self, number: int, address: str) -> Parcel:
        """
        Change the delivery address of a registered parcel.

        Raises:
            ResourceNotFoundError: If the parcel does not exist
            ParcelNotRegisteredError: If the parcel has already been sent
        """
        if not await self.store.set_address(number, address):
            await self._reject(number, "address change")

        return await self.get(number)

    async def delete(self, number: int) -> None:
        """
        Delete a registered parcel.

        Raises:
            ResourceNotFoundError: If the parcel does not exist
            ParcelNotRegisteredError: If the parcel has already been sent
        """
        if not await self.store.delete(number):
            await self._reject(number, "delete")

        logger.info("Deleted parcel %d", number)

    async def _reject(self, number: int, action: str) -> None:
        # The write already decided; this read only explains why nothing changed
        parcel = await self.get(number)
        logger.warning(
            "Rejected %s for parcel %d with status '%s'", action, number, parcel.status
        )
        raise ParcelNotRegisteredError(number, parcel.status)
