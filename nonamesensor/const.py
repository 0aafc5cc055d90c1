MODEL = "Noname chinese outdoor temperature & humidity sensor"

# Radio parameters of the transmitter, used by the pulse demodulator in
# front of us. Widths are in microseconds.
MODULATION = "OOK_PULSE_PPM"
SHORT_WIDTH = 2000
LONG_WIDTH = 4000
GAP_LIMIT = 9000
RESET_LIMIT = 100000

# the signal is sent 6 times with a sync pulse between,
# at least this many identical rows must be received
MIN_REPEATS = 4

FRAME_BITS = 42
FRAME_BYTES = 6

# Decoder status codes
DECODE_ABORT_LENGTH = -1
DECODE_ABORT_EARLY = -2
DECODE_FAIL_SANITY = -3
DECODE_FAIL_MIC = -4

# Sanity limits
TEMPERATURE_MIN = -50
TEMPERATURE_MAX = 200
HUMIDITY_MAX = 100

# Battery status
BATTERY_LOW = "LOW"
BATTERY_OK = "OK"

INTEGRITY = "CHECKSUM"

OUTPUT_FIELDS = [
    "model",
    "id",
    "channel",
    "battery",
    "temperature_C",
    "humidity",
    "mic",
]
