"""
NMEA Sentence Parsing

Minimal parsing of the two sentences that carry a position fix:
- $--GGA: fix data (quality 0 = no fix)
- $--RMC: recommended minimum (status A = valid, V = void)

Talker prefix (GP, GN, GL, ...) is ignored.
"""

import logging
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


def validate_checksum(sentence: str) -> bool:
    """Validate the *hh checksum of an NMEA sentence"""
    if not sentence.startswith("$") or "*" not in sentence:
        return False
    try:
        payload, checksum_str = sentence[1:].split("*", 1)
        expected = int(checksum_str[:2], 16)
    except ValueError:
        return False

    calculated = 0
    for char in payload:
        calculated ^= ord(char)
    return calculated == expected


def parse_latlon(value: str, direction: str, is_lat: bool) -> Optional[float]:
    """
    Parse NMEA DDMM.MMMM / DDDMM.MMMM into decimal degrees.

    Example:
        parse_latlon("4807.038", "N", is_lat=True)  # 48.1173
    """
    if not value or not direction:
        return None

    deg_len = 2 if is_lat else 3
    if len(value) < deg_len:
        return None

    try:
        degrees = int(value[:deg_len])
        minutes = float(value[deg_len:])
    except ValueError:
        return None

    decimal = degrees + minutes / 60.0
    if direction.upper() in ("S", "W"):
        decimal = -decimal
    return decimal


def parse_fix(sentence: str) -> Optional[Tuple[float, float]]:
    """
    Extract (latitude, longitude) from a GGA or RMC sentence.

    Returns:
        Coordinates if the sentence carries a valid fix, None otherwise
        (other sentence types, bad checksum, no fix)
    """
    sentence = sentence.strip()
    if not validate_checksum(sentence):
        return None

    fields = sentence[1:].split("*", 1)[0].split(",")
    kind = fields[0][-3:]

    if kind == "GGA" and len(fields) >= 7:
        # $GPGGA,time,lat,N,lon,E,quality,...
        if fields[6] in ("", "0"):
            return None
        lat = parse_latlon(fields[2], fields[3], is_lat=True)
        lon = parse_latlon(fields[4], fields[5], is_lat=False)
    elif kind == "RMC" and len(fields) >= 7:
        # $GPRMC,time,status,lat,N,lon,E,...
        if fields[2] != "A":
            return None
        lat = parse_latlon(fields[3], fields[4], is_lat=True)
        lon = parse_latlon(fields[5], fields[6], is_lat=False)
    else:
        return None

    if lat is None or lon is None:
        logger.debug(f"Unparseable coordinates in: {sentence}")
        return None
    return lat, lon
