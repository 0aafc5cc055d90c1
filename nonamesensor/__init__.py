""" """

import sys
import logging

assert sys.version_info >= (3, 0)

_LOGGER = logging.getLogger(__name__)

__version__ = '0.1.0'


def async_listen(stream, callback):

    from .protocol import decode_packet

    def listener():
        _LOGGER.debug('Listening to stream %s', stream)

        for line in stream:
            packet = decode_packet(line)
            if packet is not None:
                callback(packet)

        _LOGGER.debug('End of stream %s', stream)

    from threading import Thread
    thread = Thread(target=listener)
    thread.start()
    return thread
