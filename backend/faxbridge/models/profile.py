"""
Direction profiles.

A profile captures everything that differs between the Sent and Received
flows (which party is fixed, which timestamp/phone/sender heuristics apply,
and how leftovers are handled) so a single pipeline can serve both.
"""

from enum import Enum
from typing import Literal, Optional, Tuple
from pydantic import BaseModel

from faxbridge.models.record import Direction

# Fixed values of the prior-authorization workflow
OFFICE_FAX_NUMBER = "(207) 261 - 0798"
PRIOR_AUTH_SUBJECT = "PRIOR AUTHORIZATION PRESCRIPTION REQUEST"
SUPPLIER_NAME = "RIGHT CHOICE MEDICAL SUPPLY"


class TimestampFormat(str, Enum):
    DATE_ONLY = "date_only"  # M/D/YYYY, time synthesized
    DATE_TIME = "date_time"  # M/D/YYYY H:MM AM|PM


class DirectionProfile(BaseModel):
    """Immutable description of one pipeline variant."""
    name: str
    direction: Direction
    dynamic_party: Literal["from", "to"]
    fixed_to: Optional[str] = None
    fixed_from: Optional[str] = None
    subject: str = PRIOR_AUTH_SUBJECT
    # None means the sender is the physician named in the document
    fixed_sender: Optional[str] = None
    timestamp_formats: Tuple[TimestampFormat, ...] = (TimestampFormat.DATE_TIME,)
    date_label: str = r"Exam Date:"
    day_offset: int = 0
    time_periods: Tuple[str, ...] = ("AM", "PM")
    phone_labels: Tuple[str, ...] = ("Fax:",)
    phone_charset: str = r"[0-9-]"
    strict_phone: bool = False
    sweep_leftovers: bool = False
    upload_requires_relocation: bool = True

    class Config:
        frozen = True


SENT = DirectionProfile(
    name="sent",
    direction=Direction.SENT,
    dynamic_party="from",
    fixed_to=OFFICE_FAX_NUMBER,
    fixed_sender=SUPPLIER_NAME,
    timestamp_formats=(TimestampFormat.DATE_ONLY,),
    day_offset=1,
)

SENT_SAME_DAY = SENT.model_copy(update={"name": "sent_same_day", "day_offset": 0})

RECEIVED = DirectionProfile(
    name="received",
    direction=Direction.RECEIVED,
    dynamic_party="to",
    fixed_from=OFFICE_FAX_NUMBER,
    timestamp_formats=(TimestampFormat.DATE_TIME,),
    phone_labels=("Fax:", "To:", "FAX:", "TO:"),
    phone_charset=r"[0-9\s-]",
    strict_phone=True,
    sweep_leftovers=True,
)

# Earlier Received flow: the remote fax number is read from the "Fax:" label
# and lands in "from", our own number is "to". Its header stamps were only
# ever afternoon times, so an AM time is not a match.
RECEIVED_LEGACY = DirectionProfile(
    name="received_legacy",
    direction=Direction.RECEIVED,
    dynamic_party="from",
    fixed_to=OFFICE_FAX_NUMBER,
    timestamp_formats=(TimestampFormat.DATE_TIME,),
    time_periods=("PM",),
    upload_requires_relocation=False,
)

PROFILES: dict[str, DirectionProfile] = {
    p.name: p for p in (SENT, SENT_SAME_DAY, RECEIVED, RECEIVED_LEGACY)
}


def get_profile(name: str) -> DirectionProfile:
    """
    Look up a built-in profile by name (case-insensitive).

    Raises ValueError for unknown names.
    """
    resolved = name.lower().strip()
    profile = PROFILES.get(resolved)
    if profile is None:
        raise ValueError(
            f"Unknown direction profile {resolved!r}. "
            f"Supported profiles: {sorted(PROFILES)}"
        )
    return profile
