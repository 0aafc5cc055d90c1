"""
parse frames as dumped by the bit acquisition front end and decode them
"""

import logging
import re

from . import const
from .protocols.noname import FailureReason, decode, to_record

_LOGGER = logging.getLogger(__name__)

# [01] {42} 0e 20 cd 80 0c 40 : 00001110 00100000 ...
ROW_PATTERN = re.compile(
    r"^\s*(?:\[\d+\])?\s*(?:\{(?P<bits>\d+)\})?\s*(?P<hex>[0-9a-fA-Fx\s]*)$"
)


def _parse(line):
    """
    returns the frame, or DECODE_ABORT_EARLY / DECODE_ABORT_LENGTH

    >>> _parse("hello")
    -2
    >>> _parse("0e20cd800c")
    -1
    """
    line = line.split(":", 1)[0]
    match = ROW_PATTERN.match(line)
    if not match:
        _LOGGER.debug("Skipping malformed frame <%s>", line)
        return const.DECODE_ABORT_EARLY

    bits = match.group("bits")
    if bits is not None and int(bits) != const.FRAME_BITS:
        _LOGGER.debug("Abort length: got %s bits", bits)
        return const.DECODE_ABORT_LENGTH

    data = "".join(match.group("hex").split())
    if data.lower().startswith("0x"):
        data = data[2:]

    try:
        frame = bytes.fromhex(data)
    except ValueError:
        _LOGGER.debug("Skipping malformed frame <%s>", line)
        return const.DECODE_ABORT_EARLY

    if len(frame) != const.FRAME_BYTES:
        _LOGGER.debug("Abort length: got %d bytes", len(frame))
        return const.DECODE_ABORT_LENGTH

    return frame


def parse_frame(line):
    """
    parse a frame given as hex, optionally as a row dump with bit count

    >>> parse_frame("0e20cd800c40")
    b'\\x0e \\xcd\\x80\\x0c@'

    >>> parse_frame("[01] {42} 0e 20 cd 80 0c 40 : 00001110 00100000")
    b'\\x0e \\xcd\\x80\\x0c@'

    >>> parse_frame("0x0e20cd800c40")
    b'\\x0e \\xcd\\x80\\x0c@'

    Wrong bit count
    >>> parse_frame("{41} 0e 20 cd 80 0c 40") is None
    True

    Wrong number of bytes
    >>> parse_frame("0e20cd800c") is None
    True

    Not hex
    >>> parse_frame("hello") is None
    True

    Tab separated
    >>> parse_frame("0e\\t20\\tcd\\t80\\t0c\\t40")
    b'\\x0e \\xcd\\x80\\x0c@'
    """
    frame = _parse(line)
    if isinstance(frame, int):
        return None
    return frame


def _log_failure(reason, frame):
    if reason in (
        FailureReason.TEMPERATURE_OUT_OF_RANGE,
        FailureReason.HUMIDITY_OUT_OF_RANGE,
    ):
        _LOGGER.info(
            "Discarding implausible frame <%s> (checksum ok): %s",
            frame.hex(),
            reason.value,
        )
    else:
        _LOGGER.debug("Discarding frame <%s>: %s", frame.hex(), reason.value)


def decode_frame(frame):
    """
    decode a frame
    returns the reading or the reason for discarding it
    """
    result = decode(frame, logger=_LOGGER)
    if isinstance(result, FailureReason):
        _log_failure(result, frame)
    return result


def decode_packet(line):
    """
    decode a line into a record, None if it should be discarded

    >>> decode_packet("[01] {42} 0e 20 cd 80 0c 40")["temperature_C"]
    20.5

    >>> decode_packet("0e20cd800c00") is None
    True
    """
    if isinstance(line, bytes):
        try:
            line = line.decode()
        except UnicodeDecodeError:
            _LOGGER.debug("Skipping malformed frame <%s>", line)
            return None

    frame = parse_frame(line)
    if frame is None:
        return None

    result = decode_frame(frame)
    if isinstance(result, FailureReason):
        return None
    return to_record(result)


def decode_lines(lines):
    """
    decode all non-empty lines
    yields tuples (line, outcome) where outcome is a Reading,
    a FailureReason, DECODE_ABORT_LENGTH for frames of the wrong size
    or DECODE_ABORT_EARLY for lines that are not frames at all

    >>> lines = ["0e20cd800c40", "", "00000000ffff", "0e20", "hello"]
    >>> [o for _, o in decode_lines(lines)]  # doctest: +NORMALIZE_WHITESPACE
    [Reading(id=14, channel=3, temperature_c=20.5, humidity_pct=64,
             battery_low=False, checksum_valid=True),
     <FailureReason.ALL_ZERO: 'all zero'>, -1, -2]
    """
    for line in lines:
        line = line.strip()
        if not line:
            continue
        frame = _parse(line)
        if isinstance(frame, int):
            yield line, frame
        else:
            yield line, decode_frame(frame)
