"""Geohash encoding of coordinates and neighbour search ranges."""

from __future__ import annotations

import base64
import math

DEFAULT_BIT_SIZE = 64  # 32 bits for latitude, 32 for longitude

_DR = math.pi / 180.0
EARTH_RADIUS = 6372797.560856
MERCATOR_MAX = 20037726.37
MERCATOR_MIN = -20037726.37

_STD_ALPHABET = b"ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
_GEO_ALPHABET = b"0123456789bcdefghjkmnpqrstuvwxyz"
_TRANSLATION = bytes.maketrans(_STD_ALPHABET, _GEO_ALPHABET)


def _encode(latitude: float, longitude: float, bit_size: int) -> tuple[bytes, list[list[float]]]:
    """Return the hash bits and the ``[[lng_lo, lng_hi], [lat_lo, lat_hi]]`` box."""
    box = [[-180.0, 180.0], [-90.0, 90.0]]
    pos = (longitude, latitude)
    buf = bytearray((bit_size + 7) // 8)
    precision = 0
    while precision < bit_size:
        for direction, val in enumerate(pos):
            mid = (box[direction][0] + box[direction][1]) / 2
            if val < mid:
                box[direction][1] = mid
            else:
                box[direction][0] = mid
                buf[precision >> 3] |= 1 << (7 - (precision & 7))
            precision += 1
            if precision == bit_size:
                break
    return bytes(buf), box


def _decode(buf: bytes) -> list[list[float]]:
    box = [[-180.0, 180.0], [-90.0, 90.0]]
    direction = 0
    for code in buf:
        for shift in range(7, -1, -1):
            mid = (box[direction][0] + box[direction][1]) / 2
            if code & (1 << shift):
                box[direction][0] = mid
            else:
                box[direction][1] = mid
            direction ^= 1
    return box


def to_int(buf: bytes) -> int:
    """Read the first 8 bytes as a big-endian integer, padding short input with zeros."""
    return int.from_bytes(bytes(buf[:8]).ljust(8, b"\x00"), "big")


def from_int(code: int) -> bytes:
    """Return the 8 big-endian bytes of a 64-bit code."""
    return code.to_bytes(8, "big")


def encode(latitude: float, longitude: float) -> int:
    """Return the 64-bit geohash of a coordinate."""
    buf, _ = _encode(latitude, longitude, DEFAULT_BIT_SIZE)
    return to_int(buf)


def decode(code: int) -> tuple[float, float]:
    """Return the ``(latitude, longitude)`` at the centre of a 64-bit geohash cell."""
    box = _decode(from_int(code))
    lng = (box[0][0] + box[0][1]) / 2
    lat = (box[1][0] + box[1][1]) / 2
    return lat, lng


def to_string(buf: bytes) -> str:
    """Return the base32 text of geohash bytes, without padding."""
    return base64.b32encode(bytes(buf)).rstrip(b"=").translate(_TRANSLATION).decode()


def _estimate_precision_by_radius(radius_meters: float, latitude: float) -> int:
    if radius_meters == 0:
        return DEFAULT_BIT_SIZE - 1
    precision = 1
    while radius_meters < MERCATOR_MAX:
        radius_meters *= 2
        precision += 1
    precision -= 2  # make sure the range is covered in most base cases
    if latitude > 66 or latitude < -66:
        precision -= 1
        if latitude > 80 or latitude < -80:
            precision -= 1
    precision = max(1, min(precision, 32))
    return precision * 2 - 1


def distance(latitude1: float, longitude1: float, latitude2: float, longitude2: float) -> float:
    """Return the great-circle distance between two coordinates in metres."""
    rad_lat1 = latitude1 * _DR
    rad_lat2 = latitude2 * _DR
    a = rad_lat1 - rad_lat2
    b = longitude1 * _DR - longitude2 * _DR
    return 2 * EARTH_RADIUS * math.asin(
        math.sqrt(math.sin(a / 2) ** 2 + math.cos(rad_lat1) * math.cos(rad_lat2) * math.sin(b / 2) ** 2)
    )


def to_range(scope: bytes, precision: int) -> tuple[int, int]:
    """Return the ``[lower, upper)`` code range covered by a geohash prefix."""
    lower = to_int(scope)
    return lower, lower + (1 << (64 - precision))


def _valid_lat(lat: float) -> float:
    return max(-90.0, min(lat, 90.0))


def _valid_lng(lng: float) -> float:
    if lng > 180:
        return lng - 360
    if lng < -180:
        return lng + 360
    return lng


def get_neighbours(latitude: float, longitude: float, radius_meters: float) -> list[tuple[int, int]]:
    """Return the code ranges of the cell holding the point and its eight neighbours."""
    precision = _estimate_precision_by_radius(radius_meters, latitude)
    center, box = _encode(latitude, longitude, precision)
    height = box[0][1] - box[0][0]
    width = box[1][1] - box[1][0]
    center_lng = (box[0][1] + box[0][0]) / 2
    center_lat = (box[1][1] + box[1][0]) / 2
    max_lat = _valid_lat(center_lat + height)
    min_lat = _valid_lat(center_lat - height)
    max_lng = _valid_lng(center_lng + width)
    min_lng = _valid_lng(center_lng - width)

    def cell(lat: float, lng: float) -> tuple[int, int]:
        buf, _ = _encode(lat, lng, precision)
        return to_range(buf, precision)

    return [
        cell(max_lat, min_lng),
        cell(max_lat, center_lng),
        cell(max_lat, max_lng),
        cell(center_lat, min_lng),
        to_range(center, precision),
        cell(center_lat, max_lng),
        cell(min_lat, min_lng),
        cell(min_lat, center_lng),
        cell(min_lat, max_lng),
    ]