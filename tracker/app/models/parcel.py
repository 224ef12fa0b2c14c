"""
Parcel database model.

One row per tracked parcel in the ``parcel`` table.
"""

from sqlalchemy import Column, Integer, String
from tracker.app.db.session import Base


class ParcelRow(Base):
    """
    Storage row for a parcel.
    
    ``number`` is assigned by the database on insert. ``created_at`` is kept
    as the ISO-8601 text the caller supplied, never reparsed.
    """
    __tablename__ = "parcel"
    
    number = Column(Integer, primary_key=True, autoincrement=True)
    
    # Owner - external client id, not enforced
    client = Column(Integer, nullable=False, index=True)
    
    # Lifecycle
    status = Column(String, nullable=False)
    address = Column(String, nullable=False)
    
    # Timestamps
    created_at = Column(String, nullable=False)
    
    def __repr__(self):
        return f"<ParcelRow(number={self.number}, client={self.client}, status='{self.status}')>"
