"""
Unknown brand chinese outdoor meteo sensor, temperature and humidity

Transmits every ~50s, 42 bits (10.5 nibbles):

    Byte:      0        1        2        3        4        5
    Type:      IIIIIIII ??CCTTTT TTTTTTTT HHHHHHHH ???BXXXX XX

- I: sensor id (changes on battery change)
- C: channel number - 1
- T: temperature in C scaled by 10, 12 bit signed
- H: humidity scaled by 2
- B: battery low flag (voltage below 2.6V)
- X: checksum, sum of all preceding nibbles modulo 64
- ?: unknown
"""
from collections import OrderedDict, namedtuple
from enum import Enum

from .. import const

Reading = namedtuple(
    "Reading",
    "id channel temperature_c humidity_pct battery_low checksum_valid",
)


class FailureReason(Enum):
    ALL_ZERO = "all zero"
    CHECKSUM_MISMATCH = "checksum mismatch"
    TEMPERATURE_OUT_OF_RANGE = "temperature out of range"
    HUMIDITY_OUT_OF_RANGE = "humidity out of range"

    @property
    def code(self):
        """
        Status code as reported by the decoder framework

        >>> FailureReason.CHECKSUM_MISMATCH.code
        -4
        >>> FailureReason.ALL_ZERO.code
        -3
        """
        if self is FailureReason.CHECKSUM_MISMATCH:
            return const.DECODE_FAIL_MIC
        return const.DECODE_FAIL_SANITY


def _checksum(b):
    checksum = sum((x >> 4) + (x & 0x0F) for x in b[:4])
    checksum += b[4] >> 4
    return checksum & 0x3F


def decode(frame, logger=None):
    """
    Decode a 42 bit frame, given as 6 bytes.
    Returns a Reading, or the FailureReason why the frame was discarded.

    >>> decode(bytes.fromhex("0e20cd800c40"))
    Reading(id=14, channel=3, temperature_c=20.5, humidity_pct=64, \
battery_low=False, checksum_valid=True)

    >>> decode(bytes.fromhex("0e2fa5800d80")).temperature_c
    -9.1

    >>> decode(bytes.fromhex("0e20cd800c00"))
    <FailureReason.CHECKSUM_MISMATCH: 'checksum mismatch'>

    >>> decode(bytes(6))
    <FailureReason.ALL_ZERO: 'all zero'>

    >>> decode(b"\\x0e\\x20")
    Traceback (most recent call last):
        ...
    ValueError: Expected 6 bytes, got 2
    """
    b = bytes(frame)
    if len(b) != const.FRAME_BYTES:
        raise ValueError(
            "Expected %d bytes, got %d" % (const.FRAME_BYTES, len(b))
        )

    if not any(b[:4]):
        if logger:
            logger.debug("Data all 0x00")
        return FailureReason.ALL_ZERO

    if logger:
        logger.debug("Hex input: %s", b.hex())

    checksum = _checksum(b)
    checksum_recv = ((b[4] & 0x0F) << 2) | (b[5] >> 6)

    if logger:
        logger.debug(
            "Checksum: 0x%02x, received: 0x%02x", checksum, checksum_recv
        )

    if checksum != checksum_recv:
        return FailureReason.CHECKSUM_MISMATCH

    channel = ((b[1] >> 4) & 0x3) + 1

    value = ((b[1] & 0x0F) << 8) | b[2]
    if value & 0x800:
        value -= 4096
    temp = value / 10

    humidity = b[3] >> 1
    battery_low = bool((b[4] >> 4) & 0x1)

    if not const.TEMPERATURE_MIN < temp < const.TEMPERATURE_MAX:
        if logger:
            logger.debug("Invalid temperature: %.1f", temp)
        return FailureReason.TEMPERATURE_OUT_OF_RANGE

    if humidity > const.HUMIDITY_MAX:
        if logger:
            logger.debug("Invalid humidity: %d", humidity)
        return FailureReason.HUMIDITY_OUT_OF_RANGE

    return Reading(
        id=b[0],
        channel=channel,
        temperature_c=temp,
        humidity_pct=humidity,
        battery_low=battery_low,
        checksum_valid=True,
    )


def encode(id, channel, temperature_c, humidity_pct, battery_low=False):
    """
    Build the 6 byte frame a sensor would send

    >>> encode(14, 3, 20.5, 64).hex()
    '0e20cd800c40'

    >>> encode(14, 3, -9.1, 64).hex()
    '0e2fa5800d80'

    >>> encode(14, 5, 20.5, 64)
    Traceback (most recent call last):
        ...
    ValueError: Invalid channel 5
    """
    if not 0 <= id <= 0xFF:
        raise ValueError("Invalid id %s" % id)
    if not 1 <= channel <= 4:
        raise ValueError("Invalid channel %s" % channel)
    if not 0 <= humidity_pct <= 0x7F:
        raise ValueError("Invalid humidity %s" % humidity_pct)

    value = int(round(temperature_c * 10))
    if not -0x800 <= value < 0x800:
        raise ValueError("Invalid temperature %s" % temperature_c)
    value &= 0xFFF

    b = bytearray(const.FRAME_BYTES)
    b[0] = id
    b[1] = ((channel - 1) << 4) | (value >> 8)
    b[2] = value & 0xFF
    b[3] = humidity_pct << 1
    b[4] = 0x10 if battery_low else 0

    checksum = _checksum(b)
    b[4] |= checksum >> 2
    b[5] = (checksum & 0x3) << 6
    return bytes(b)


def to_record(reading):
    """
    >>> to_record(decode(bytes.fromhex("0e20cd801c80")))["battery"]
    'LOW'
    """
    return OrderedDict(
        model=const.MODEL,
        id=reading.id,
        channel=reading.channel,
        battery=const.BATTERY_LOW if reading.battery_low else const.BATTERY_OK,
        temperature_C=round(reading.temperature_c, 1),
        humidity=reading.humidity_pct,
        mic=const.INTEGRITY,
    )
