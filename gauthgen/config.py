import os

# Google Authenticator defaults
TIME_STEP   = 30
CODE_DIGITS = 6

DEFAULT_SECRET_LENGTH = 32
MIN_SECRET_LENGTH     = 1
MAX_SECRET_LENGTH     = 255

MIN_QR_SIZE       = 200
DEFAULT_SVG_NAME  = "qrcode"
MAX_NAME_ATTEMPTS = 10000

QR_NAME    = os.environ.get('GAUTH_QR_NAME', 'gauth-generator')
QR_TITLE   = os.environ.get('GAUTH_QR_TITLE', 'cli')
OUTPUT_DIR = os.environ.get('GAUTH_OUTPUT_DIR', '.')

# Counters are packed as unsigned 64-bit integers
MAX_COUNTER = 2 ** 64 - 1
MAX_TIMESTAMP = 2 ** 64 - 1
# One day of steps either side
MAX_DISCREPANCY = 2880
