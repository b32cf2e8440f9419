import inspect
import numbers
import os
import re
from typing import Any, Optional
from urllib.parse import urlparse

from audiokit.errors import InvalidArgument

# Defaults (environment overrides are read once at import)
DEFAULT_SAMPLE_RATE: int = int(os.environ.get("AUDIOKIT_SAMPLE_RATE", "44100"))
DEFAULT_DTYPE: str = "float32"
URL_TIMEOUT: float = float(os.environ.get("AUDIOKIT_URL_TIMEOUT", "30"))

# Arrays shorter than this whose items are all sequences are per-channel data
RAW_GROUP_LIMIT: int = 32

# Options handed to the decoder when the caller gives none
DEFAULT_DECODE_OPTIONS: dict[str, Any] = {"dtype": DEFAULT_DTYPE}

SUPPORTED_OUTPUT_FORMATS: set[str] = {".mp3", ".wav", ".flac", ".ogg", ".m4a"}

# Deterministic mapping from extension to pydub format tag
FORMAT_EXPORT_MAP: dict[str, str] = {
    ".mp3": "mp3",
    ".wav": "wav",
    ".flac": "flac",
    ".ogg": "ogg",
    ".m4a": "mp4",
}

CHANNEL_LAYOUTS: dict[str, int] = {
    "mono": 1,
    "stereo": 2,
    "quad": 4,
    "5.1": 6,
}

SAMPLE_DTYPES: set[str] = {"float32", "float64", "int8", "uint8", "int16", "int32"}

URL_SCHEMES: set[str] = {"http", "https"}


# Type helpers

def is_numeric(value: Any) -> bool:
    """True for real numbers, numpy scalars included, but not for bools."""
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def is_url(name: str) -> bool:
    return urlparse(name).scheme.lower() in URL_SCHEMES


def parse_format(text: str) -> dict[str, Any]:
    """
    Parse a compact format string into constructor options.

    Example: "stereo 48000 int16"  →  {"channels": 2, "sample_rate": 48000, "dtype": "int16"}
    """
    options: dict[str, Any] = {}
    for token in re.split(r"[\s,]+", text.strip().lower()):
        if not token:
            continue
        if token in CHANNEL_LAYOUTS:
            options["channels"] = CHANNEL_LAYOUTS[token]
        elif token.isdigit():
            options["sample_rate"] = int(token)
        elif token in SAMPLE_DTYPES:
            options["dtype"] = token
        else:
            raise InvalidArgument(
                f"Unknown format token: '{token}'.\n"
                f"    → Use a channel layout ({', '.join(CHANNEL_LAYOUTS)}), "
                f"a sample rate, or a dtype ({', '.join(sorted(SAMPLE_DTYPES))})."
            )
    return options


# Path helpers

def resolve_path(file_name: str, depth: int = 2) -> str:
    """
    Resolve *file_name* relative to the file of the caller *depth* frames up.

    URLs and absolute paths pass through unchanged. Callers without a source
    file (REPL, ``python -c``) resolve against the working directory.
    """
    if is_url(file_name) or os.path.isabs(file_name):
        return file_name

    stack = inspect.stack(context=0)
    caller: Optional[str] = stack[depth].filename if len(stack) > depth else None
    if caller is None or caller.startswith("<"):
        base_dir: str = os.getcwd()
    else:
        base_dir = os.path.dirname(os.path.abspath(caller))
    return os.path.normpath(os.path.join(base_dir, file_name))


def validate_output_path(path: str) -> None:
    """Raise InvalidArgument / FileNotFoundError if the output path is invalid."""
    ext: str = os.path.splitext(path)[1].lower()
    if ext not in SUPPORTED_OUTPUT_FORMATS:
        raise InvalidArgument(
            f"Unsupported output format: '{ext}'.\n"
            f"    Supported: {', '.join(sorted(SUPPORTED_OUTPUT_FORMATS))}\n"
            f"    → Example: audio.save('take_01.wav')"
        )

    output_dir: str = os.path.dirname(os.path.abspath(path))
    if not os.path.exists(output_dir):
        raise FileNotFoundError(
            f"Output directory does not exist: '{output_dir}'.\n"
            f"    → Create the directory first, or choose an existing path."
        )


def get_export_format(path: str) -> str:
    """Return the pydub export format string for the given output path."""
    ext: str = os.path.splitext(path)[1].lower()
    return FORMAT_EXPORT_MAP.get(ext, "wav")
