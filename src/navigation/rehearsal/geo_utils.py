# geo_utils.py
# Pure mathematical / geographic helper functions plus markup stripping.
# No side effects, no imports from other project modules.

import math
from html.parser import HTMLParser
from typing import List


EARTH_RADIUS_M = 6_371_000.0


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Metres between two step start points along the earth's surface.

    Used for the spacing rule between selected junctions.
    """
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    half_d_phi = math.radians(lat2 - lat1) / 2
    half_d_lambda = math.radians(lon2 - lon1) / 2
    h = math.sin(half_d_phi) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(half_d_lambda) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(h)))


def calculate_bearing(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Compass heading a driver faces when leaving (lat1, lon1) towards
    (lat2, lon2): the initial great-circle bearing, 0 = north, in [0, 360).
    """
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_lambda = math.radians(lon2 - lon1)
    east = math.sin(d_lambda) * math.cos(phi2)
    north = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(d_lambda)
    return math.degrees(math.atan2(east, north)) % 360.0


# ---------------------------------------------------------------------------
# Markup → plain text
# ---------------------------------------------------------------------------

class _TextHandler(HTMLParser):
    """Collects text content only; tags are dropped, entities decoded."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.parts: List[str] = []

    def handle_data(self, data: str) -> None:
        self.parts.append(data)


def strip_markup(markup: str) -> str:
    """
    Reduce a markup-annotated instruction to its text content.

    "Turn <b>left</b> onto <b>A4</b>" → "Turn left onto A4"
    """
    if not markup:
        return ""
    handler = _TextHandler()
    handler.feed(markup)
    handler.close()
    return "".join(handler.parts)
