from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


@dataclass(frozen=True)
class Settings:
    strict_coordinates: bool = False
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    csv_version: str = "1.0"
    csv_survey: str = "Converted from CSV"
    csv_datum: str = "WGS84"
    # Directory the "path" form field may read from; None disables path input
    data_root: Optional[str] = None


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", name, raw)
        return default


def load_settings() -> Settings:
    """Read converter settings from the environment.

    Env vars:
      SP1_STRICT_COORDINATES=1  reject unparsable x/y instead of yielding NaN
      SP1_MAX_UPLOAD_BYTES      upload size limit (int, default 10 MiB)
      SP1_CSV_VERSION           header attached to CSV->SP1 output (default '1.0')
      SP1_CSV_SURVEY            (default 'Converted from CSV')
      SP1_CSV_DATUM             (default 'WGS84')
      SP1_DATA_ROOT             server directory readable through the "path" field (unset: disabled)
    """
    return Settings(
        strict_coordinates=os.getenv("SP1_STRICT_COORDINATES", "0") == "1",
        max_upload_bytes=_int_env("SP1_MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES),
        csv_version=os.getenv("SP1_CSV_VERSION", "1.0"),
        csv_survey=os.getenv("SP1_CSV_SURVEY", "Converted from CSV"),
        csv_datum=os.getenv("SP1_CSV_DATUM", "WGS84"),
        data_root=os.getenv("SP1_DATA_ROOT") or None,
    )
