import codecs
import gzip
import logging
import zlib
from pathlib import Path
from typing import Optional, Tuple, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# Order matters: longer marks first, and only these three are recognized.
BOMS = (
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)

# Tried in order when there is no BOM; the first strict decode wins.
CASCADE = ("utf-8", "utf-16-le", "utf-16-be")


def read_bytes(path: PathLike) -> bytes:
    """Read the whole file, gunzipping ``*.gz`` inputs."""
    path = Path(path)
    _open = gzip.open if path.suffix == ".gz" else open
    with _open(path, "rb") as f:
        try:
            return f.read()
        except (EOFError, zlib.error) as e:
            # truncated or damaged gzip body
            raise OSError(f"{path}: {e}") from e


def detect_bom(data: bytes) -> Optional[Tuple[str, int]]:
    for bom, codec in BOMS:
        if data.startswith(bom):
            return codec, len(bom)
    return None


def _warn_corrupt(name):
    logger.warning(f"Decoding errors were encountered for file {name}. Some characters might be incorrect.")


def decode_bytes(data: bytes, name: str = "<bytes>") -> str:
    """
    Turn raw file content into text. Never fails: if nothing decodes cleanly the
    content is decoded as UTF-8 with replacement characters and a warning naming
    ``name`` is logged.

    Priority: byte-order-mark, then strict UTF-8, UTF-16LE, UTF-16BE, then lossy UTF-8.
    """
    bom = detect_bom(data)
    if bom is not None:
        codec, bom_len = bom
        payload = data[bom_len:]
        try:
            text = payload.decode(codec)
        except UnicodeDecodeError:
            _warn_corrupt(name)
            text = payload.decode(codec, errors="replace")
        logger.debug(f"{name}: decoded as {codec} (BOM)")
        return text

    for codec in CASCADE:
        try:
            text = data.decode(codec)
        except UnicodeDecodeError:
            continue
        logger.debug(f"{name}: decoded as {codec}")
        return text

    _warn_corrupt(name)
    return data.decode("utf-8", errors="replace")


def decode(path: PathLike) -> str:
    """Read and decode ``path``. Only I/O errors (``OSError``) escape."""
    return decode_bytes(read_bytes(path), str(path))
