#!/usr/bin/env python3
"""
Decode frames from a noname chinese outdoor temperature & humidity sensor

Usage:
  nonamesensor (-h | --help)
  nonamesensor --version
  nonamesensor [-v|-vv] [options] parse [<frame>...]
  nonamesensor [-v|-vv] [options] encode [--battery-low] [--]
               <channel> <id> <temp> <humidity>
  nonamesensor [-v|-vv] [options] sensors
  nonamesensor [-v|-vv] [options] info

Options:
  --battery-low         Set the battery low flag when encoding
  -h --help             Show this message
  -v,-vv                Increase verbosity
  -d                    Debug
  --version             Show version
"""

import docopt
import logging
import re
from collections import Counter
from datetime import datetime
from sys import argv, stdin, stderr, version_info
from os.path import join, dirname, expanduser
from os import environ as env
from itertools import product
from json import dumps as to_json

import coloredlogs
from yaml import safe_load_all as load_yaml

from nonamesensor import __version__, const
from nonamesensor.protocol import decode_lines
from nonamesensor.protocols.noname import FailureReason, encode, to_record

LOGFMT = "%(asctime)s %(levelname)5s (%(threadName)s) [%(name)s] %(message)s"
DATEFMT = "%y-%m-%d %H:%M.%S"
_LOGGER = logging.getLogger(__name__)

_ = version_info >= (3, 7) or exit("Python 3.7 required")


def parse_isoformat(s):
    """Parse string with date in ISO 8601 format as datetime

    >>> parse_isoformat("2016-01-15T11:39:15")
    datetime.datetime(2016, 1, 15, 11, 39, 15)
    """
    return datetime(*map(int, re.split("[-:T]", s)))


def split_timestamp(line):
    """Split an optional leading timestamp from a frame line

    >>> split_timestamp("2016-01-15T11:39:15 0e20cd800c40")
    (datetime.datetime(2016, 1, 15, 11, 39, 15), '0e20cd800c40')

    >>> split_timestamp("[01] {42} 0e 20 cd 80 0c 40")
    (None, '[01] {42} 0e 20 cd 80 0c 40')
    """
    line = line.strip()
    if " " in line:
        timestamp, rest = line.split(" ", 1)
        try:
            return parse_isoformat(timestamp), rest
        except (ValueError, TypeError):
            pass
    return None, line


CONFIG_DIRECTORIES = [
    dirname(argv[0]),
    expanduser("~"),
    env.get("XDG_CONFIG_HOME", join(expanduser("~"), ".config")),
]

CONFIG_FILES = ["nonamesensor.conf", ".nonamesensor.conf"]


def read_config():
    for directory, filename in product(CONFIG_DIRECTORIES, CONFIG_FILES):
        try:
            config = join(directory, filename)
            _LOGGER.debug("checking for config file %s", config)
            with open(config) as config:
                return [e for e in load_yaml(config) if e]
        except (IOError, OSError):
            continue
    return []


def sensor_name(config, record):
    """Look up the configured name of the sensor that sent the record

    >>> config = [dict(name="Garden", channel=3, id=14)]
    >>> sensor_name(config, dict(channel=3, id=14))
    'Garden'
    >>> sensor_name(config, dict(channel=1, id=14)) is None
    True
    """
    return next(
        (
            e["name"]
            for e in config
            if e.get("channel") == record["channel"]
            and e.get("id") == record["id"]
        ),
        None,
    )


def parse(frames, config):
    """Decode frames, print successfully decoded ones as json"""
    stats = Counter()
    for line in frames or stdin:
        timestamp, line = split_timestamp(line)
        for _, outcome in decode_lines([line]):
            if outcome == const.DECODE_ABORT_LENGTH:
                stats["abort length"] += 1
                continue
            if outcome == const.DECODE_ABORT_EARLY:
                stats["malformed"] += 1
                continue
            if isinstance(outcome, FailureReason):
                stats[outcome.value] += 1
                continue

            stats["ok"] += 1
            packet = to_record(outcome)
            name = sensor_name(config, packet)
            if name:
                packet.update(name=name)
            if timestamp:
                packet.update(
                    lastUpdated=int(timestamp.timestamp()),
                    time=timestamp.isoformat(),
                )
            print(to_json(packet))

    _LOGGER.info(
        "Decoded %d frames: %s",
        sum(stats.values()),
        ", ".join("%s=%d" % item for item in sorted(stats.items())),
    )
    return stats


def info():
    """Print the radio parameters of the sensor"""
    print(const.MODEL)
    for name, value in (
        ("modulation", const.MODULATION),
        ("short width", const.SHORT_WIDTH),
        ("long width", const.LONG_WIDTH),
        ("gap limit", const.GAP_LIMIT),
        ("reset limit", const.RESET_LIMIT),
        ("min repeats", const.MIN_REPEATS),
        ("bits", const.FRAME_BITS),
        ("fields", ", ".join(const.OUTPUT_FIELDS)),
    ):
        print("- %s: %s" % (name, value))


def main(args):

    config = read_config()

    if args["parse"]:
        parse(args["<frame>"], config)
    elif args["encode"]:
        try:
            frame = encode(
                int(args["<id>"], 0),
                int(args["<channel>"]),
                float(args["<temp>"]),
                int(args["<humidity>"]),
                battery_low=args["--battery-low"],
            )
        except ValueError as e:
            exit(str(e))
        print("{%d} %s" % (const.FRAME_BITS, frame.hex()))
    elif args["sensors"]:
        for e in config:
            print("-", e["name"])
    elif args["info"]:
        info()


def app_main():
    args = docopt.docopt(__doc__, version=__version__)

    debug = args["-d"]

    if debug:
        log_level = logging.DEBUG
    else:
        log_level = [logging.ERROR, logging.INFO, logging.DEBUG][args["-v"]]

    coloredlogs.install(
        level=log_level, stream=stderr, datefmt=DATEFMT, fmt=LOGFMT
    )

    logging.captureWarnings(debug)

    if debug:
        _LOGGER.info("Debug is on")

    try:
        main(args)
    except KeyboardInterrupt:
        exit()


if __name__ == "__main__":
    app_main()
