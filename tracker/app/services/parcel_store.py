"""
Parcel storage service.

Maps the Parcel record onto the ``parcel`` table. Every method issues exactly
one statement; errors from the database are re-raised unchanged.
"""

from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, insert, update, delete
from sqlalchemy.exc import SQLAlchemyError

from tracker.app.models.parcel import ParcelRow
from tracker.app.models.parcel_enums import ParcelStatus
from tracker.app.schemas.parcel import Parcel


_COLUMNS = (
    ParcelRow.number,
    ParcelRow.client,
    ParcelRow.status,
    ParcelRow.address,
    ParcelRow.created_at,
)


def _to_parcel(row) -> Parcel:
    return Parcel(
        number=row.number,
        client=row.client,
        status=row.status,
        address=row.address,
        created_at=row.created_at,
    )


class ParcelStore:
    """
    Data access for parcels.

    Holds nothing but the session, so one store can be shared for as long
    as the session can.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, parcel: Parcel) -> int:
        """
        Insert a new parcel row.

        Args:
            parcel: Record to store; its ``number`` is ignored

        Returns:
            Number assigned by the database
        """
        stmt = (
            insert(ParcelRow)
            .values(
                client=parcel.client,
                status=parcel.status,
                address=parcel.address,
                created_at=parcel.created_at,
            )
            .returning(ParcelRow.number)
        )
        try:
            result = await self.db.execute(stmt)
            number = result.scalar_one()
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

        return number

    async def get(self, number: int) -> Parcel:
        """
        Read one parcel by number.

        Raises:
            NoResultFound: If no parcel has this number
        """
        result = await self.db.execute(
            select(*_COLUMNS).where(ParcelRow.number == number)
        )
        return _to_parcel(result.one())

    async def get_by_client(self, client: int) -> List[Parcel]:
        """
        Read every parcel of a client.

        Returns an empty list when the client has none. Order is whatever
        the database returns.
        """
        result = await self.db.execute(
            select(*_COLUMNS).where(ParcelRow.client == client)
        )
        return [_to_parcel(row) for row in result.all()]

    async def set_status(self, number: int, status: str) -> bool:
        """
        Overwrite the status of a parcel, whatever its current status.

        Returns:
            True if a row was updated, False if the number does not exist
        """
        stmt = (
            update(ParcelRow)
            .where(ParcelRow.number == number)
            .values(status=status)
        )
        return await self._write(stmt)

    async def set_address(self, number: int, address: str) -> bool:
        """
        Overwrite the address of a parcel that is still registered.

        The status condition is part of the UPDATE itself, so a parcel that
        has already been sent is left untouched and no error is raised.

        Returns:
            True if the address changed, False if the parcel is missing or
            no longer registered
        """
        stmt = (
            update(ParcelRow)
            .where(
                ParcelRow.number == number,
                ParcelRow.status == ParcelStatus.REGISTERED.value,
            )
            .values(address=address)
        )
        return await self._write(stmt)

    async def delete(self, number: int) -> bool:
        """
        Delete a parcel that is still registered.

        Returns:
            True if the row was removed, False if the parcel is missing or
            no longer registered
        """
        stmt = delete(ParcelRow).where(
            ParcelRow.number == number,
            ParcelRow.status == ParcelStatus.REGISTERED.value,
        )
        return await self._write(stmt)

    async def _write(self, stmt) -> bool:
        try:
            result = await self.db.execute(
                stmt.execution_options(synchronize_session=False)
            )
            affected = result.rowcount
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

        return affected > 0
