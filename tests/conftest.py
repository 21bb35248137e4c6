"""Shared boarding pass scans for the test suite."""

# Third-party imports
import pytest

# Scans captured from real boarding passes.
GARUDA = "M1PRASETYO/YUDHA DWI  EE6UVIL CGKSUBGA 0312 260Y045C0120 348>5180  5259B1A              2A12621429493830 GA                        N"
LION_AIR = "M1BAYU/MUHAMMAD MR    ESMMTHQ DHXCGKID 6473 032Y007A0002 300."
CITILINK = "M1LADOA/RICKYFEBRIANTO ZKMR9K SUBCGKQG 0725 168Y017A0016 147>1181WW5166BQG 000000000000029177000000000- 0"
BATIK_AIR = "M1ABU TALIB/SUZANA MS EQQZBWR KULTWUOD 1900 129Y012F0118 100"
AIRASIA = "M1Ongere/Mark Mokaya  EPBC4GN KULLGKAK 6306 108Y019B0026 11E>3180MM    B                00"
INFANT = "M1MAYZURA/AUFARIZA HANEBJQUJW CGKUPGID 6296 147Y0INF0097 100"
LION_AIR_TITLED = "M1PUTRI/SITI MS       EXYZ789 CGKSUBJT 0610 277Y023B0045 300"
NO_TITLE = "M1SMITH/JOHN          EABC123 CGKJKTGA 0001 001Y001A0001 100"
SHORT_NAME = "M1AMELIA/VINO         EFGH345 CGKBDOQG 1630 284Y029A0045 290>4012WC0011BQG 000000000000056789000000000- 0"
PNR_STARTS_WITH_G = "M1OKTAVIA/KENNY       GHIJ567 CGKBDOQG 1630 284Y002O0012 334>8457BX8890BQG 000000000000062747000000000- 0"

# Strict IATA column layout with no padding between fields.
FIXED_WIDTH = (
    "M1" + "PRASETYOWIBOWO/YUDHA" + "E" + "ABC123" + "CGK" + "SUB" + "GA"
    + "00312" + "260" + "Y" + "045C" + "0120" + "1" + "348>5180"
)

ALL_SCANS = [
    GARUDA, LION_AIR, CITILINK, BATIK_AIR, AIRASIA, INFANT,
    LION_AIR_TITLED, NO_TITLE, SHORT_NAME, PNR_STARTS_WITH_G, FIXED_WIDTH,
]


@pytest.fixture
def scan_file(tmp_path):
    """A batch input file with accepted, rejected and blank lines."""
    path = tmp_path / "scans.txt"
    path.write_text(
        "\n".join([GARUDA, "", INFANT, "NOT A BOARDING PASS"]) + "\n",
        encoding="utf-8",
    )
    return path
