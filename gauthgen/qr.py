import enum
import io
import logging
import os
import xml.etree.ElementTree as ET

import qrcode
import qrcode.constants
import qrcode.exceptions
from qrcode.image.svg import SvgPathImage

from gauthgen import config
from gauthgen.errors import FilesystemError, InvalidErrorCorrectionLevel, RenderError

logger = logging.getLogger(__name__)

SVG_NAMESPACE = "http://www.w3.org/2000/svg"


class ErrorCorrectionLevel(enum.Enum):
    LOW      = qrcode.constants.ERROR_CORRECT_L
    MEDIUM   = qrcode.constants.ERROR_CORRECT_M
    QUARTILE = qrcode.constants.ERROR_CORRECT_Q
    HIGH     = qrcode.constants.ERROR_CORRECT_H

    @classmethod
    def parse(cls, token: str) -> "ErrorCorrectionLevel":
        """
        Accepts the level name, its initial or its index, in any case:
        "l", "low", "0" ... "h", "high", "3"
        """
        level = _TOKENS.get(token.strip().lower())
        if level is None:
            raise InvalidErrorCorrectionLevel(token)
        return level


_TOKENS = {}
for _index, _level in enumerate(ErrorCorrectionLevel):
    for _token in (_level.name.lower(), _level.name[0].lower(), str(_index)):
        _TOKENS[_token] = _level


def render_svg(data: str, width: int, height: int,
               ecl: ErrorCorrectionLevel = ErrorCorrectionLevel.LOW) -> str:
    """Render `data` as a standalone SVG document sized `width` x `height` pixels."""
    if width < config.MIN_QR_SIZE or height < config.MIN_QR_SIZE:
        raise RenderError(
            f"QR code must be at least {config.MIN_QR_SIZE}x{config.MIN_QR_SIZE}, "
            f"got {width}x{height}"
        )

    qr = qrcode.QRCode(error_correction=ecl.value, border=4)
    qr.add_data(data)
    try:
        qr.make(fit=True)
    except (qrcode.exceptions.DataOverflowError, ValueError) as e:
        # qrcode 8 reports a version past 40 as a plain ValueError
        raise RenderError(f"Data too long for a QR code at level {ecl.name.lower()}") from e
    img = qr.make_image(image_factory=SvgPathImage)

    img_io = io.BytesIO()
    img.save(img_io)
    # The viewBox keeps the modules scaled to the pixel size set here
    root = ET.fromstring(img_io.getvalue())
    root.set("width", str(width))
    root.set("height", str(height))
    ET.register_namespace("", SVG_NAMESPACE)
    return ET.tostring(root, encoding="unicode")


def next_available_path(directory: str = ".", name: str = config.DEFAULT_SVG_NAME,
                        max_attempts: int = config.MAX_NAME_ATTEMPTS) -> str:
    """
    First of NAME.svg, NAME0.svg, NAME1.svg, ... that does not exist yet
    """
    path = os.path.join(directory, f"{name}.svg")
    for i in range(max_attempts):
        if not os.path.exists(path):
            return path
        logger.debug("%s exists", path)
        path = os.path.join(directory, f"{name}{i}.svg")
    if not os.path.exists(path):
        return path
    raise FilesystemError(
        f"No free file name for {name}.svg in {directory} after {max_attempts} attempts"
    )


def write_svg(svg: str, directory: str = ".", name: str = config.DEFAULT_SVG_NAME,
              max_attempts: int = config.MAX_NAME_ATTEMPTS) -> str:
    """Write `svg` to a new file without overwriting anything, returns the path."""
    path = next_available_path(directory, name, max_attempts)
    try:
        # "x" refuses to clobber a file created since the probe
        with open(path, "x", encoding="utf-8") as f:
            f.write(svg)
    except OSError as e:
        raise FilesystemError(f"Cannot write {path}: {e}") from e
    logger.debug("wrote %d bytes to %s", len(svg), path)
    return path
