"""Symbol encoder adapter: text -> boolean module matrix via the ``qrcode`` library."""

from enum import Enum

import qrcode
import qrcode.constants
from qrcode.exceptions import DataOverflowError

from qrtistry.errors import ConfigValidationError, EncodingError
from qrtistry.logging import audit, get_logger, trace

log = get_logger("encoder")


class ECCLevel(Enum):
    L = qrcode.constants.ERROR_CORRECT_L  # 7%
    M = qrcode.constants.ERROR_CORRECT_M  # 15%
    Q = qrcode.constants.ERROR_CORRECT_Q  # 25%
    H = qrcode.constants.ERROR_CORRECT_H  # 30%


ECC_NAMES = {"L": ECCLevel.L, "M": ECCLevel.M, "Q": ECCLevel.Q, "H": ECCLevel.H}


@trace
def encode_matrix(data: str, ecc: str = "M", version: int | None = None) -> list[list[bool]]:
    """Encode *data* and return the module matrix (True = dark), without quiet zone.

    Args:
        data: Text to encode.
        ecc: Error correction level L/M/Q/H.
        version: Symbol version 1-40 (None = smallest that fits).

    Raises:
        ConfigValidationError: unknown error correction level.
        EncodingError: empty data, or data too long for the level/version.
    """
    level = ECC_NAMES.get(ecc.upper())
    if level is None:
        raise ConfigValidationError("ecc", f"{ecc!r} is not one of L, M, Q, H")
    if not data:
        raise EncodingError("nothing to encode")

    qr = qrcode.QRCode(
        version=version,
        error_correction=level.value,
        box_size=1,
        border=0,
    )
    qr.add_data(data)
    try:
        qr.make(fit=(version is None))
    except (DataOverflowError, ValueError) as exc:
        raise EncodingError(f"cannot encode {len(data)} chars at ECC {ecc.upper()}: {exc}") from exc

    modules = [[bool(m) for m in row] for row in qr.modules]
    audit("symbol.encoded", logger=log,
          data=data[:80], version=qr.version,
          size=f"{len(modules)}x{len(modules)}", ecc=ecc.upper())
    return modules
