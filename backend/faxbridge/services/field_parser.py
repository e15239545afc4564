"""
Field parser for prior-authorization fax text.

Turns the (messy, whitespace-mangled) text of one fax into a FaxRecord using
a fixed set of regex heuristics selected by a DirectionProfile. Extraction is
best-effort and order-sensitive: the first match for each field wins, and the
only fallback is the PHYSICIAN INFORMATION -> PHYSICIAN NAME chain.
"""

import logging
import random
import re
from datetime import date, datetime, time, timedelta
from typing import List, Optional, Tuple

from faxbridge.models.profile import DirectionProfile, TimestampFormat
from faxbridge.models.record import FaxRecord
from faxbridge.services.extractor import normalize_text

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Synthesized times fall in [08:00:00, 17:00:00)
BUSINESS_HOURS_START = 8
BUSINESS_HOURS_END = 17

_SLASH_DATE = r"(?P<month>\d{1,2})/(?P<day>\d{1,2})/(?P<year>\d{4})"

_DATE_TIME_RE = re.compile(
    _SLASH_DATE + r" (?P<hour>\d{1,2}):(?P<minute>\d{2}) (?P<period>[AP]M)",
    re.IGNORECASE,
)

_CREDENTIALS = r"(?:MD|M\.D\.|DO|D\.O\.|APN|N\.P\.|M\.D|D\.O|APRN|APRN\.)"

_PHYSICIAN_INFO_RE = re.compile(
    r"PHYSICIAN INFORMATION\s*([A-Z\s,\.]+" + _CREDENTIALS + r")",
    re.IGNORECASE,
)
_PHYSICIAN_NAME_RE = re.compile(
    r"PHYSICIAN NAME\s*[:\-]?\s*([A-Z\s,\.]+)",
    re.IGNORECASE,
)

_NON_DIGIT_RE = re.compile(r"\D")

_rng = random.Random()


# ---------------------------------------------------------------------------
# Phone numbers
# ---------------------------------------------------------------------------

def format_phone_number(phone: str) -> str:
    """
    Format a digit string as (xxx) xxx - xxxx.

    Anything that is not exactly 10 characters long is returned unchanged.
    """
    if len(phone) == 10:
        return f"({phone[:3]}) {phone[3:6]} - {phone[6:]}"
    return phone


def extract_phone_number(text: str, profile: DirectionProfile) -> Optional[str]:
    """
    Find the first labeled fax number in the text.

    Strict profiles keep only exactly-10-digit numbers; lax profiles keep any
    non-empty digit string (formatted only when it has 10 digits).
    """
    labels = "|".join(re.escape(label) for label in profile.phone_labels)
    pattern = rf"(?:{labels})\s*({profile.phone_charset}+)"
    match = re.search(pattern, text, re.IGNORECASE)
    if not match:
        return None

    digits = _NON_DIGIT_RE.sub("", match.group(1))
    if profile.strict_phone and len(digits) != 10:
        logger.debug("Discarding malformed fax number %r", match.group(1))
        return None
    if not digits:
        return None
    return format_phone_number(digits)


# ---------------------------------------------------------------------------
# Timestamps
# ---------------------------------------------------------------------------

def _random_business_time(rng: random.Random) -> time:
    return time(
        rng.randrange(BUSINESS_HOURS_START, BUSINESS_HOURS_END),
        rng.randrange(60),
        rng.randrange(60),
    )


def _extract_date_only(text: str, profile: DirectionProfile, rng: random.Random) -> Optional[str]:
    match = re.search(profile.date_label + r"\s*" + _SLASH_DATE, text, re.IGNORECASE)
    if not match:
        return None

    try:
        found = date(int(match["year"]), int(match["month"]), int(match["day"]))
        found -= timedelta(days=profile.day_offset)
    except (ValueError, OverflowError):
        logger.warning("Ignoring impossible date %r", match.group(0))
        return None

    return datetime.combine(found, _random_business_time(rng)).strftime(TIMESTAMP_FORMAT)


def _extract_date_time(text: str, profile: DirectionProfile) -> Optional[str]:
    match = _DATE_TIME_RE.search(text)
    if not match:
        return None

    hour = int(match["hour"])
    period = match["period"].upper()
    if period not in profile.time_periods:
        logger.debug("Period %s not accepted by profile %s", period, profile.name)
        return None
    if not 1 <= hour <= 12:
        logger.warning("Ignoring impossible 12-hour time %r", match.group(0))
        return None
    if period == "PM" and hour != 12:
        hour += 12
    elif period == "AM" and hour == 12:
        hour = 0

    try:
        found = datetime(
            int(match["year"]), int(match["month"]), int(match["day"]),
            hour, int(match["minute"]),
        )
        found -= timedelta(days=profile.day_offset)
    except (ValueError, OverflowError):
        logger.warning("Ignoring impossible date/time %r", match.group(0))
        return None

    return found.strftime(TIMESTAMP_FORMAT)


def extract_timestamp(
    text: str,
    profile: DirectionProfile,
    rng: Optional[random.Random] = None,
) -> Optional[str]:
    """
    Extract createdAt as 'YYYY-MM-DD HH:MM:SS'.

    Formats are tried in the profile's order; the first one that yields a
    timestamp wins.
    """
    rng = rng or _rng
    for fmt in profile.timestamp_formats:
        if fmt == TimestampFormat.DATE_ONLY:
            value = _extract_date_only(text, profile, rng)
        else:
            value = _extract_date_time(text, profile)
        if value:
            return value
    return None


# ---------------------------------------------------------------------------
# Physician name
# ---------------------------------------------------------------------------

def extract_physician_name(text: str) -> Optional[str]:
    """
    Name from the PHYSICIAN INFORMATION block (must end in a credential),
    falling back to whatever follows a bare PHYSICIAN NAME label.
    """
    match = _PHYSICIAN_INFO_RE.search(text) or _PHYSICIAN_NAME_RE.search(text)
    if not match:
        return None
    name = match.group(1).strip()
    return name or None


# ---------------------------------------------------------------------------
# Record assembly
# ---------------------------------------------------------------------------

def missing_fields(record: FaxRecord, profile: DirectionProfile) -> List[str]:
    """Wire names of the required fields that are still null."""
    required = {
        "createdAt": record.created_at,
        profile.dynamic_party: record.to if profile.dynamic_party == "to" else record.from_,
        "sender": record.sender,
    }
    return [name for name, value in required.items() if not value]


def build_candidate(
    text: str,
    profile: DirectionProfile,
    rng: Optional[random.Random] = None,
) -> FaxRecord:
    """Run every extractor and return the (possibly incomplete) record."""
    normalized = normalize_text(text)

    created_at = extract_timestamp(normalized, profile, rng)
    phone = extract_phone_number(normalized, profile)
    sender = profile.fixed_sender or extract_physician_name(normalized)

    logger.debug("Extracted createdAt: %s", created_at)
    logger.debug("Extracted %s: %s", profile.dynamic_party, phone)
    logger.debug("Extracted sender: %s", sender)

    if profile.dynamic_party == "to":
        to, from_ = phone, profile.fixed_from
    else:
        to, from_ = profile.fixed_to, phone

    return FaxRecord(
        direction=profile.direction,
        to=to,
        from_=from_,
        subject=profile.subject,
        sender=sender,
        created_at=created_at,
    )


def parse_with_diagnostics(
    text: str,
    profile: DirectionProfile,
    rng: Optional[random.Random] = None,
) -> Tuple[Optional[FaxRecord], List[str]]:
    """
    Parse fax text, also returning the names of any missing required fields.

    Returns:
        (record, []) on success, (None, missing_field_names) otherwise.
    """
    record = build_candidate(text, profile, rng)
    missing = missing_fields(record, profile)
    if missing:
        logger.info("Required fields missing: %s", ", ".join(missing))
        return None, missing
    return record, []


def parse_fax_text(
    text: str,
    profile: DirectionProfile,
    rng: Optional[random.Random] = None,
) -> Optional[FaxRecord]:
    """
    Parse fax text into a FaxRecord.

    Returns None when createdAt, the profile's dynamic party number, or the
    sender could not be extracted.
    """
    record, _ = parse_with_diagnostics(text, profile, rng)
    return record
