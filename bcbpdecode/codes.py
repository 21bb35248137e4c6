"""IATA code translations for displaying decoded boarding passes."""

# Project imports
from bcbpdecode.boarding_pass import ParsedBoardingPass

AIRPORTS = {
    'CGK': "Soekarno-Hatta International Airport",
    'DPS': "Ngurah Rai International Airport",
    'SUB': "Juanda International Airport",
    'KNO': "Kualanamu International Airport",
    'BDO': "Husein Sastranegara International Airport",
    'JOG': "Adisucipto International Airport",
    'SRG': "Ahmad Yani International Airport",
    'SOC': "Adi Sumarmo International Airport",
    'UPG': "Sultan Hasanuddin International Airport",
    'BPN': "Sultan Aji Muhammad Sulaiman Airport",
}

AIRLINES = {
    'GA': "Garuda Indonesia",
    'JT': "Lion Air",
    'QG': "Citilink",
    'ID': "Batik Air",
    'QZ': "AirAsia Indonesia",
    'IW': "Wings Air",
    'IN': "NAM Air",
    'SJ': "Sriwijaya Air",
    'QD': "JC International Airlines",
}

CABIN_CLASSES = {
    'F': "First Class",
    'C': "Business Class",
    'W': "Premium Economy",
    'Y': "Economy Class",
    'J': "Business (alternate)",
}


def describe(bp: ParsedBoardingPass) -> dict:
    """
    Translates a boarding pass's codes into readable names.

    Codes without a translation are returned unchanged.
    """
    return {
        'origin': AIRPORTS.get(bp.origin, bp.origin),
        'destination': AIRPORTS.get(bp.destination, bp.destination),
        'airline': AIRLINES.get(bp.airline_code, bp.airline_code),
        'cabin_class': CABIN_CLASSES.get(bp.cabin_class, bp.cabin_class),
    }
