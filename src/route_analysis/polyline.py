"""
Google encoded polyline format.

Each coordinate is a delta from the previous one at 1e-5 degree precision,
zigzag encoded and written as 5-bit chunks offset by 63.
"""

from models.route import LatLng

PRECISION = 1e5


def _decode_value(encoded: str, index: int) -> tuple[int, int]:
    result = 0
    shift = 0
    while True:
        byte = ord(encoded[index]) - 63
        index += 1
        result |= (byte & 0x1F) << shift
        shift += 5
        if byte < 0x20:
            break
    delta = ~(result >> 1) if result & 1 else result >> 1
    return delta, index


def decode_polyline(encoded: str) -> list[LatLng]:
    """
    Decode an encoded polyline into coordinates.

    Example:
        decode_polyline("_p~iF~ps|U_ulLnnqC_mqNvxq`@")
        -> [(38.5, -120.2), (40.7, -120.95), (43.252, -126.453)]
    """
    points: list[LatLng] = []
    index = 0
    lat = lng = 0
    length = len(encoded)
    while index < length:
        try:
            d_lat, index = _decode_value(encoded, index)
            d_lng, index = _decode_value(encoded, index)
        except IndexError as e:
            raise ValueError(f"Truncated polyline at position {index}") from e
        lat += d_lat
        lng += d_lng
        points.append(LatLng(lat=lat / PRECISION, lng=lng / PRECISION))
    return points


def _encode_value(value: int) -> str:
    value = ~(value << 1) if value < 0 else value << 1
    chunks = []
    while value >= 0x20:
        chunks.append(chr((0x20 | (value & 0x1F)) + 63))
        value >>= 5
    chunks.append(chr(value + 63))
    return "".join(chunks)


def encode_polyline(points: list[LatLng]) -> str:
    encoded = []
    prev_lat = prev_lng = 0
    for point in points:
        lat = round(point.lat * PRECISION)
        lng = round(point.lng * PRECISION)
        encoded.append(_encode_value(lat - prev_lat))
        encoded.append(_encode_value(lng - prev_lng))
        prev_lat, prev_lng = lat, lng
    return "".join(encoded)
