import base64
import hashlib
import hmac
import logging
import secrets
import struct
import time
import urllib.parse

from gauthgen import config
from gauthgen.errors import (
    FilesystemError,
    GAuthError,
    InvalidErrorCorrectionLevel,
    InvalidSecret,
    RenderError,
)
from gauthgen.qr import ErrorCorrectionLevel, render_svg

__all__ = [
    "GoogleAuthenticator",
    "ErrorCorrectionLevel",
    "GAuthError",
    "InvalidSecret",
    "InvalidErrorCorrectionLevel",
    "FilesystemError",
    "RenderError",
    "create_secret",
    "get_code",
    "verify_code",
    "provisioning_uri",
]

logger = logging.getLogger(__name__)


class GoogleAuthenticator:
    """
    TOTP generator and verifier with Google Authenticator conventions:
    HMAC-SHA1, 30 second steps and 6 digit codes.
    """
    interval = config.TIME_STEP
    digits   = config.CODE_DIGITS

    @staticmethod
    def create_secret(length: int = config.DEFAULT_SECRET_LENGTH) -> str:
        """
        Return `length` random bytes as unpadded uppercase Base32
        """
        if not config.MIN_SECRET_LENGTH <= length <= config.MAX_SECRET_LENGTH:
            raise ValueError(
                f"secret length must be between {config.MIN_SECRET_LENGTH} "
                f"and {config.MAX_SECRET_LENGTH}, got {length}"
            )
        random_bytes = secrets.token_bytes(length)
        return base64.b32encode(random_bytes).decode('ascii').rstrip('=')

    @staticmethod
    def decode_secret(secret: str) -> bytes:
        # Apps show secrets in groups of four and in either case
        normalized = secret.replace(" ", "").upper()
        if "=" not in normalized:
            normalized += "=" * (-len(normalized) % 8)
        try:
            return base64.b32decode(normalized)
        except ValueError as e:
            raise InvalidSecret(f"Invalid secret: {e}") from e

    def get_time_counter(self, for_time: int = 0) -> int:
        """
        Counter of the 30 second slice containing `for_time`, 0 meaning now
        """
        if for_time == 0:
            for_time = int(time.time())
        return int(for_time // self.interval)

    def hotp(self, secret_bytes: bytes, counter: int) -> str:
        """RFC 4226 code for `counter`, zero padded to `digits`."""
        if not 0 <= counter <= config.MAX_COUNTER:
            raise ValueError(f"counter must be between 0 and {config.MAX_COUNTER}, got {counter}")
        counter_bytes  = struct.pack(">Q", counter)
        hmac_hash      = hmac.new(secret_bytes, counter_bytes, hashlib.sha1).digest()
        # Low nibble of the last byte picks the 4 byte window, top bit dropped
        offset         = hmac_hash[-1] & 0x0F
        truncated_hash = hmac_hash[offset:offset + 4]
        code           = struct.unpack(">I", truncated_hash)[0] & 0x7fffffff
        return str(code % (10 ** self.digits)).zfill(self.digits)

    def get_code(self, secret: str, counter: int) -> str:
        return self.hotp(self.decode_secret(secret), counter)

    def verify_code(self, secret: str, code: str, discrepancy: int = 0, time_slice: int = 0) -> bool:
        """
        Check `code` against every counter within `discrepancy` steps of the
        slice containing `time_slice` (UNIX seconds, 0 meaning now).

        Never raises on a malformed secret or code, those simply fail, as do
        a negative or out of range timestamp or discrepancy.
        """
        if len(code) != self.digits or not (code.isascii() and code.isdigit()):
            return False
        try:
            secret_bytes = self.decode_secret(secret)
        except InvalidSecret:
            logger.debug("rejecting code for a malformed secret")
            return False

        if not 0 <= discrepancy <= config.MAX_DISCREPANCY:
            logger.debug("rejecting discrepancy %d", discrepancy)
            return False
        if not 0 <= time_slice <= config.MAX_TIMESTAMP:
            logger.debug("rejecting timestamp %d", time_slice)
            return False

        current = self.get_time_counter(time_slice)
        start   = max(current - discrepancy, 0)
        end     = min(current + discrepancy, config.MAX_COUNTER)
        for counter in range(start, end + 1):
            if hmac.compare_digest(self.hotp(secret_bytes, counter), code):
                logger.debug("code matched counter %d (current %d)", counter, current)
                return True
        return False

    def provisioning_uri(self, secret: str, account: str, issuer: str) -> str:
        """
        Generate provisioning URI for authenticator apps
        """
        # URL-encode account and issuer values
        label = "{}:{}".format(
            urllib.parse.quote(issuer, safe=""),
            urllib.parse.quote(account, safe=""),
        )
        params = {
            "secret": secret,
            "issuer": issuer,
        }
        query = urllib.parse.urlencode(params, quote_via=urllib.parse.quote)
        return f"otpauth://totp/{label}?{query}"

    def qr_code(self, secret: str, account: str, issuer: str,
                width: int = config.MIN_QR_SIZE, height: int = config.MIN_QR_SIZE,
                ecl: ErrorCorrectionLevel = ErrorCorrectionLevel.LOW) -> str:
        """
        Render the provisioning URI as an SVG document
        """
        return render_svg(self.provisioning_uri(secret, account, issuer), width, height, ecl)


_authenticator = GoogleAuthenticator()

create_secret    = _authenticator.create_secret
get_code         = _authenticator.get_code
verify_code      = _authenticator.verify_code
provisioning_uri = _authenticator.provisioning_uri
