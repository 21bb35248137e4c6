"""Tools for decoding Bar-Coded Boarding Pass (BCBP) text."""

# Standard imports
import calendar
import json
from dataclasses import dataclass, asdict
from datetime import datetime, date, timedelta
from pathlib import Path
from zoneinfo import ZoneInfo
from zipfile import ZipFile

# Third-party imports
from dateutil.parser import isoparse

# Format code and minimum length every supported layout shares.
FORMAT_CODE = "M"
MIN_LENGTH = 50

# Strict fixed-width layouts need the whole mandatory block.
FIXED_WIDTH_MIN_LENGTH = 55
# More spaces than this means the text is padded with delimiters rather
# than laid out in fixed columns.
FIXED_WIDTH_MAX_SPACES = 5
FIXED_WIDTH_CONDITIONAL_START = 55

# Ticket type letters a carrier may separate from the PNR with a space.
ETICKET_INDICATORS = frozenset({"E", "M", "Z", "T", "B"})

PASSENGER_TITLES = frozenset({"MR", "MS", "MRS", "MISS", "DR", "PROF"})

DEFAULT_CABIN_CLASS = "Y"
INFANT_SEAT_MARKER = "INF"

# Strict IATA mandatory block. Slices are never applied to stripped text;
# only the extracted values are stripped.
_FIXED_WIDTH_FIELDS = [
    # 11. Passenger Name
    {'key': 'passenger_name', 'chars': slice(2, 22),
        'strip': True, 'required': True},
    # 253. Electronic Ticket Indicator
    {'key': 'e_ticket_indicator', 'chars': slice(22, 23),
        'strip': False, 'required': True},
    # 7. Operating carrier PNR Code
    {'key': 'booking_code', 'chars': slice(23, 29),
        'strip': True, 'required': True},
    # 26. From City Airport Code
    {'key': 'origin', 'chars': slice(29, 32),
        'strip': False, 'required': True},
    # 38. To City Airport Code
    {'key': 'destination', 'chars': slice(32, 35),
        'strip': False, 'required': True},
    # 42. Operating Carrier Designator
    {'key': 'airline_code', 'chars': slice(35, 37),
        'strip': False, 'required': True},
    # 43. Flight Number
    {'key': 'flight_number', 'chars': slice(37, 42),
        'strip': True, 'required': True},
    # 46. Date of Flight (Julian Date)
    {'key': 'flight_date_julian', 'chars': slice(42, 45),
        'strip': False, 'required': True},
    # 71. Compartment Code
    {'key': 'cabin_class', 'chars': slice(45, 46),
        'strip': False, 'required': True},
    # 104. Seat Number
    {'key': 'seat_number', 'chars': slice(46, 50),
        'strip': True, 'required': False},
    # 107. Check-in Sequence Number
    {'key': 'sequence_number', 'chars': slice(50, 54),
        'strip': True, 'required': False},
]


@dataclass(frozen=True)
class ParsedBoardingPass():
    """
    Represents the mandatory fields of a decoded boarding pass.

    Only a successful decoding strategy creates one of these, so every
    instance is fully populated.
    """
    passenger_name: str
    e_ticket_indicator: str
    booking_code: str
    origin: str
    destination: str
    airline_code: str
    flight_number: str
    flight_date_julian: str
    cabin_class: str
    seat_number: str
    sequence_number: str
    infant_status: bool
    conditional_data: str | None = None

    def __str__(self):
        return (
            f"{self.flight_date_julian} {self.airline_code} "
            f"{self.flight_number} {self.origin} → {self.destination} "
            f"({self.passenger_name})"
        )

    def flight_date(self, pass_dt: datetime | None = None) -> date | None:
        """
        Resolves the Julian flight date into a calendar date.

        The boarding pass only carries the day of the year, so the year
        is estimated from pass_dt when it is available, or from the
        current date otherwise.
        """
        try:
            day_of_year: int = int(self.flight_date_julian)
        except (TypeError, ValueError):
            return None
        if day_of_year > 366 or day_of_year < 1:
            return None
        if pass_dt is None:
            # Assume flight is up to 3 days in the future, or else the
            # most recent date matching this ordinal in the past.
            latest_date = (datetime.now() + timedelta(days=3)).date()
            # Leap years can be up to 8 years apart.
            for year in range(latest_date.year, latest_date.year - 8, -1):
                test_date = _ordinal_date(year, day_of_year)
                if test_date is None or test_date > latest_date:
                    continue
                return test_date
            return None

        # The departure airport timezone is unknown, so the local
        # departure date could fall in the year before or after pass_dt.
        # Pick whichever candidate is closest to pass_dt.
        pass_date = pass_dt.date()
        years = [pass_date.year - 1, pass_date.year, pass_date.year + 1]
        dates = [_ordinal_date(y, day_of_year) for y in years]
        dates = [d for d in dates if d is not None]
        if len(dates) == 0:
            # No adjacent year is a leap year.
            return None
        return min(dates, key=lambda d: abs(d - pass_date))

    def to_dict(self) -> dict:
        """Returns the record fields as a dict."""
        return asdict(self)


class PKPass():
    """Represents an Apple Wallet PKPass boarding pass."""
    PASS_FILE = "pass.json"

    def __init__(self, path: Path):
        self.path = Path(path)
        self.pass_json = self._load_pass_json(self.path)
        self.relevant_date = self._parse_relevant_date()
        self.message = self._parse_message()
        self.boarding_pass = self._boarding_pass()

    @property
    def archive_filename(self) -> str:
        """Creates an archive filename."""
        if self.relevant_date is None:
            date_str = "NODATE"
        else:
            date_str = self.relevant_date.strftime("%Y%m%dT%H%MZ")
        fields = [date_str]
        if self.boarding_pass is not None:
            bp = self.boarding_pass
            fields.append(bp.airline_code.strip())
            fields.append(bp.flight_number)
            fields.append("-".join([bp.origin, bp.destination]))
        fields = [f for f in fields if f]
        return "_".join(fields) + ".pkpass"

    def _boarding_pass(self) -> ParsedBoardingPass | None:
        if self.message is None:
            return None
        return parse_bcbp(self.message)

    def _load_pass_json(self, path) -> dict:
        """Gets boarding pass JSON."""
        with ZipFile(path, 'r') as zf:
            if PKPass.PASS_FILE not in zf.namelist():
                print(f"⚠️ {PKPass.PASS_FILE} not found in {path}.")
                return {}
            with zf.open(PKPass.PASS_FILE) as pf:
                return json.loads(pf.read().decode('utf-8'))

    def _parse_message(self) -> str | None:
        """Gets the barcode message, preferring the legacy barcode key."""
        message = (self.pass_json.get('barcode') or {}).get('message')
        if message is not None:
            return message
        barcodes = self.pass_json.get('barcodes') or []
        if len(barcodes) == 0:
            return None
        return barcodes[0].get('message')

    def _parse_relevant_date(self) -> datetime | None:
        """Gets the PKPass date."""
        try:
            pass_date = isoparse(self.pass_json.get('relevantDate'))
            return pass_date.astimezone(ZoneInfo("UTC"))
        except (TypeError, ValueError):
            return None


def normalize_bcbp(raw_data: str) -> str:
    """
    Removes line breaks, tabs, control and non-ASCII characters.

    Spaces are kept, since they are either delimiters or padding that
    the decoding strategies strip from individual fields.
    """
    for char in ("\n", "\r", "\t"):
        raw_data = raw_data.replace(char, "")
    return "".join(
        c for c in raw_data
        if c.isascii() and c.isprintable()
    )


def format_passenger_name(raw_name: str) -> str:
    """
    Converts an IATA name into a readable name.

    "PUTRI/SITI MS" becomes "Ms Siti Putri". Names without a slash are
    only title cased. Empty parts are left out, so "SMITH/" becomes
    "Smith" with no leading space.
    """
    if "/" not in raw_name:
        return _title_case(raw_name)
    last_name, first_name = raw_name.split("/", 1)
    tokens = first_name.split()
    title = None
    if len(tokens) > 1 and tokens[-1].upper() in PASSENGER_TITLES:
        title = tokens[-1]
        first_name = " ".join(tokens[:-1])
    parts = [title, first_name, last_name]
    return " ".join(_title_case(p) for p in parts if p and p.strip())


def parse_bcbp(raw_data: str) -> ParsedBoardingPass | None:
    """
    Decodes boarding pass text, trying each strategy in turn.

    Returns None when the text is too short, does not start with the
    format code, or no strategy recognizes it.
    """
    bcbp_str = normalize_bcbp(raw_data)
    if len(bcbp_str) < MIN_LENGTH or bcbp_str[0] != FORMAT_CODE:
        return None
    for strategy in STRATEGIES:
        parsed = strategy(bcbp_str)
        if parsed is not None:
            return parsed
    return None


def parse_token_delimited(bcbp_str: str) -> ParsedBoardingPass | None:
    """
    Decodes layouts that separate fields with spaces.

    Example: M1NAME/FIRST MR       EPNR123 CGKSUBGA 0312 260Y045C0120 ...
    """
    if len(bcbp_str) < MIN_LENGTH or bcbp_str[0] != FORMAT_CODE:
        return None
    # The name has a fixed width even in space-delimited layouts.
    passenger_name = bcbp_str[2:22].strip()
    tokens = bcbp_str[22:].split()
    if len(tokens) < 4:
        return None

    # A lone indicator letter followed by the PNR is merged back into
    # one token. Any other single letter is kept as is.
    offset = 0
    pnr_token = tokens[0]
    if (len(tokens[0]) == 1 and len(tokens) >= 5
            and tokens[0].upper() in ETICKET_INDICATORS):
        pnr_token = tokens[0] + tokens[1]
        offset = 1
    e_ticket_indicator = pnr_token[0]
    booking_code = pnr_token[1:].strip()

    route_idx = 1 + offset
    flight_idx = 2 + offset
    details_idx = 3 + offset
    if len(tokens) <= details_idx:
        return None

    # Origin, destination and carrier, e.g. CGKSUBGA
    route = tokens[route_idx]
    if len(route) < 8:
        return None

    # Julian date, class, seat and sequence, e.g. 260Y045C0120
    details = tokens[details_idx]
    if len(details) < 3:
        return None
    cabin_class = details[3] if len(details) >= 4 else DEFAULT_CABIN_CLASS
    seat_raw = details[4:8].strip() if len(details) >= 8 else ""
    sequence_number = details[8:12].strip() if len(details) >= 12 else ""
    infant_status, seat_number = _infant_seat(seat_raw)

    conditional = tokens[details_idx + 1:]
    return ParsedBoardingPass(
        passenger_name=format_passenger_name(passenger_name),
        e_ticket_indicator=e_ticket_indicator,
        booking_code=booking_code,
        origin=route[0:3],
        destination=route[3:6],
        airline_code=route[6:8],
        flight_number=tokens[flight_idx],
        flight_date_julian=details[0:3],
        cabin_class=cabin_class,
        seat_number=seat_number,
        sequence_number=sequence_number,
        infant_status=infant_status,
        conditional_data=" ".join(conditional) if conditional else None,
    )


def parse_fixed_width(bcbp_str: str) -> ParsedBoardingPass | None:
    """Decodes layouts that follow the strict IATA column positions."""
    if len(bcbp_str) < FIXED_WIDTH_MIN_LENGTH or bcbp_str[0] != FORMAT_CODE:
        return None
    if bcbp_str.count(" ") > FIXED_WIDTH_MAX_SPACES:
        return None
    fields = _get_fixed_width_fields(bcbp_str)
    if fields is None:
        return None
    infant_status, seat_number = _infant_seat(fields['seat_number'])
    if len(bcbp_str) > FIXED_WIDTH_CONDITIONAL_START:
        conditional_data = bcbp_str[FIXED_WIDTH_CONDITIONAL_START:].strip()
    else:
        conditional_data = None
    return ParsedBoardingPass(
        passenger_name=format_passenger_name(fields['passenger_name']),
        e_ticket_indicator=fields['e_ticket_indicator'],
        booking_code=fields['booking_code'],
        origin=fields['origin'],
        destination=fields['destination'],
        airline_code=fields['airline_code'],
        flight_number=fields['flight_number'],
        flight_date_julian=fields['flight_date_julian'],
        cabin_class=fields['cabin_class'],
        seat_number=seat_number,
        sequence_number=fields['sequence_number'],
        infant_status=infant_status,
        conditional_data=conditional_data,
    )


# Tried in order; the first strategy to return a record wins.
STRATEGIES = (
    parse_token_delimited,
    parse_fixed_width,
)


def _get_fixed_width_fields(bcbp_str: str) -> dict | None:
    """Slices every fixed-width field, or None if one is missing."""
    fields = {}
    for field in _FIXED_WIDTH_FIELDS:
        chars = field['chars']
        if chars.stop > len(bcbp_str):
            if field['required']:
                return None
            fields[field['key']] = ""
            continue
        raw = bcbp_str[chars]
        fields[field['key']] = raw.strip() if field['strip'] else raw
    return fields


def _infant_seat(seat_raw: str) -> tuple[bool, str]:
    """Infants have INF in the seat field and no seat of their own."""
    if INFANT_SEAT_MARKER in seat_raw:
        return True, ""
    return False, seat_raw


def _ordinal_date(year: int, day_of_year: int) -> date | None:
    """Creates a date from a year and day of year."""
    if day_of_year < 1 or day_of_year > 366:
        return None
    if day_of_year == 366 and not calendar.isleap(year):
        return None
    return date(year, 1, 1) + timedelta(days=day_of_year-1)


def _title_case(text: str) -> str:
    """Capitalizes the first letter of each word, lowercasing the rest."""
    return " ".join(
        word[0].upper() + word[1:].lower() for word in text.split()
    )
