"""
Parcel Status Enumeration.
"""

import enum


class ParcelStatus(str, enum.Enum):
    """
    Parcel status enumeration.
    
    Status flow:
        REGISTERED → SENT → DELIVERED
    Only REGISTERED parcels may change address or be deleted.
    """
    REGISTERED = "registered"
    SENT = "sent"
    DELIVERED = "delivered"


# Successor of each status; DELIVERED is terminal
NEXT_STATUS = {
    ParcelStatus.REGISTERED.value: ParcelStatus.SENT.value,
    ParcelStatus.SENT.value: ParcelStatus.DELIVERED.value,
}
