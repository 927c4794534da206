"""Location utilities (NMEA parsing)."""

from location.utils.nmea import parse_fix, parse_latlon, validate_checksum

__all__ = ["parse_fix", "parse_latlon", "validate_checksum"]
