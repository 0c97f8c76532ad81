from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lon: float


# Karnataka district headquarters, decimal degrees
DISTRICT_COORDINATES: Dict[str, Coordinates] = {
    "Bagalkot": Coordinates(16.1691, 75.6615),
    "Ballari (Bellary)": Coordinates(15.1394, 76.9214),
    "Belagavi (Belgaum)": Coordinates(15.8497, 74.4977),
    "Bengaluru Rural": Coordinates(13.2257, 77.3910),
    "Bengaluru Urban": Coordinates(12.9716, 77.5946),
    "Bidar": Coordinates(17.9104, 77.5199),
    "Chamarajanagar": Coordinates(11.9261, 76.9398),
    "Chikkaballapur": Coordinates(13.4355, 77.7278),
    "Chikkamagaluru": Coordinates(13.3161, 75.7747),
    "Chitradurga": Coordinates(14.2251, 76.3980),
    "Dakshina Kannada": Coordinates(12.9141, 74.8560),
    "Davanagere": Coordinates(14.4644, 75.9218),
    "Dharwad": Coordinates(15.4589, 75.0078),
    "Gadag": Coordinates(15.4166, 75.6290),
    "Hassan": Coordinates(13.0068, 76.0996),
    "Haveri": Coordinates(14.7951, 75.3990),
    "Kalaburagi (Gulbarga)": Coordinates(17.3297, 76.8343),
    "Kodagu (Coorg)": Coordinates(12.4244, 75.7382),
    "Kolar": Coordinates(13.1360, 78.1290),
    "Koppal": Coordinates(15.3550, 76.1548),
    "Mandya": Coordinates(12.5218, 76.8958),
    "Mysuru (Mysore)": Coordinates(12.2958, 76.6394),
    "Raichur": Coordinates(16.2120, 77.3566),
    "Ramanagara": Coordinates(12.7159, 77.2826),
    "Shivamogga (Shimoga)": Coordinates(13.9299, 75.5681),
    "Tumakuru (Tumkur)": Coordinates(13.3379, 77.1010),
    "Udupi": Coordinates(13.3409, 74.7421),
    "Uttara Kannada (Karwar)": Coordinates(14.8182, 74.1240),
    "Vijayapura (Bijapur)": Coordinates(16.8302, 75.7100),
    "Yadgir": Coordinates(16.7700, 77.1383),
    "Vijayanagara": Coordinates(15.3350, 76.4700),
}


def lookup(name: Optional[str]) -> Optional[Coordinates]:
    """Coordinates for a known district name, or None."""
    if not name:
        return None
    return DISTRICT_COORDINATES.get(name.strip())


def known_locations() -> List[str]:
    return sorted(DISTRICT_COORDINATES)
