"""Functions for CLI commands."""

# Standard imports
import os
import sys
import zipfile
from datetime import date, datetime, time
from pathlib import Path

# Third-party imports
import colorama
import pandas as pd
from tabulate import tabulate

# Project imports
from bcbpdecode.boarding_pass import ParsedBoardingPass, PKPass, parse_bcbp
from bcbpdecode.codes import describe

REJECT_INVALID_FORMAT = "invalid_format"
REJECT_DATE_MISMATCH = "date_mismatch"

BATCH_COLUMNS = [
    'barcode', 'status', 'reason', 'passenger_name', 'e_ticket_indicator',
    'booking_code', 'origin', 'destination', 'airline_code',
    'flight_number', 'flight_date_julian', 'flight_date', 'cabin_class',
    'seat_number', 'sequence_number', 'infant_status', 'conditional_data',
]

colorama.init()

def decode_bcbp(bcbp_str: str, expected_date: date | None = None) -> None:
    """Decodes a Bar-Coded Boarding Pass string and displays it."""
    bp = parse_bcbp(bcbp_str)
    reason = rejection_reason(bp, expected_date)
    if bp is not None:
        print_boarding_pass(bp, _reference_dt(expected_date))
    if reason is not None:
        _warn(f"⚠️ The boarding pass was rejected: {reason}.")
        sys.exit(1)

def decode_batch(
    input_path: Path,
    output_path: Path | None = None,
    expected_date: date | None = None,
) -> pd.DataFrame:
    """Decodes a file of boarding pass scans, one per line."""
    input_path = Path(input_path)
    print(f"📄 Decoding scans from {input_path}")
    with open(input_path, 'r', encoding='utf-8', errors='replace') as f:
        scans = [line.rstrip("\r\n") for line in f]
    scans = [s for s in scans if s.strip()]

    rows = []
    for scan in scans:
        bp = parse_bcbp(scan)
        reason = rejection_reason(bp, expected_date)
        row = {} if bp is None else bp.to_dict()
        if bp is not None:
            row['flight_date'] = bp.flight_date(_reference_dt(expected_date))
        row['barcode'] = scan
        row['status'] = "rejected" if reason is not None else "accepted"
        row['reason'] = reason
        rows.append(row)
    scans_df = pd.DataFrame(rows, columns=BATCH_COLUMNS)

    if len(scans_df) == 0:
        print("ℹ️ The input file contained no scans.")
    else:
        counts = scans_df['status'].value_counts()
        print(tabulate(list(counts.items()), headers=["Status", "Scans"]))
        rejected = scans_df[scans_df['status'] == "rejected"]
        for _, row in rejected.iterrows():
            _warn(f"⚠️ Rejected ({row['reason']}): {row['barcode']}")

    if output_path is not None:
        scans_df.to_csv(output_path, index=False)
        print(f"Wrote {len(scans_df)} scan(s) to {output_path}.")
    return scans_df

def decode_pkpasses() -> None:
    """Decodes digital boarding passes in the import folder."""
    import_folder = os.getenv("BCBP_IMPORT_PATH")
    if import_folder is None:
        raise KeyError(
            "Environment variable BCBP_IMPORT_PATH is missing."
        )
    import_path = Path(import_folder)
    if not import_path.is_dir():
        raise KeyError(
            "Environment variable BCBP_IMPORT_PATH is not a directory."
        )
    print(f"Decoding digital boarding passes from {import_path}")
    pkpasses = sorted(f for f in import_path.glob("*.pkpass") if f.is_file())
    if len(pkpasses) == 0:
        print("ℹ️ No .pkpass files found.")
        return
    for pkpass_path in pkpasses:
        print(f"📄 Processing {pkpass_path}")
        try:
            pkpass = PKPass(pkpass_path)
        except zipfile.BadZipFile:
            _warn(
                f"⚠️ {pkpass_path} is not a valid .pkpass archive. "
                "Skipping this pass."
            )
            continue
        if pkpass.boarding_pass is None:
            _warn("⚠️ The boarding pass data is not valid. Skipping this pass.")
            continue
        print(pkpass.archive_filename)
        print_boarding_pass(pkpass.boarding_pass, pkpass.relevant_date)

def print_boarding_pass(
    bp: ParsedBoardingPass, pass_dt: datetime | None = None
) -> None:
    """Prints a table of boarding pass fields."""
    names = describe(bp)
    table = [
        ["Passenger", bp.passenger_name, ""],
        ["E-ticket", bp.e_ticket_indicator, ""],
        ["Booking", bp.booking_code, ""],
        ["Origin", bp.origin, names['origin']],
        ["Destination", bp.destination, names['destination']],
        ["Airline", bp.airline_code, names['airline']],
        ["Flight", bp.flight_number, ""],
        ["Date", bp.flight_date_julian, bp.flight_date(pass_dt) or ""],
        ["Class", bp.cabin_class, names['cabin_class']],
        ["Seat", bp.seat_number, "Infant" if bp.infant_status else ""],
        ["Sequence", bp.sequence_number, ""],
        ["Conditional", bp.conditional_data or "", ""],
    ]
    print(tabulate(table,
        headers=["Field", "Value", "Description"],
        disable_numparse=True,
    ))

def rejection_reason(
    bp: ParsedBoardingPass | None, expected_date: date | None = None
) -> str | None:
    """
    Classifies why a scan should be rejected.

    Returns None if the scan is acceptable.
    """
    if bp is None:
        return REJECT_INVALID_FORMAT
    if expected_date is None:
        return None
    if bp.flight_date(_reference_dt(expected_date)) != expected_date:
        return REJECT_DATE_MISMATCH
    return None

def _reference_dt(expected_date: date | None) -> datetime | None:
    """Uses the start of the expected date as the year reference."""
    if expected_date is None:
        return None
    return datetime.combine(expected_date, time())

def _warn(message: str) -> None:
    print(
        colorama.Fore.YELLOW
        + message
        + colorama.Style.RESET_ALL
    )
