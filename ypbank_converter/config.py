"""Configuration defaults, extension mapping, and .env loading.

WHY: Keeps the few user-tunable values (default format, log level) in
one place, overridable from the environment or a .env file, so the CLI
never hardcodes them.

HOW: python-dotenv loads the .env file on import. Values are read with
``os.getenv`` and exposed as module-level constants.

RULES:
- EXTENSION_FORMATS maps lower-case extensions (with dot) to format names
- Unknown or missing extensions fall back to DEFAULT_FORMAT
- Unrecognised env values are logged and replaced by the built-in default
- BIN wire constants (magic, size bounds) are NOT configurable; they
  live in codecs.bin_codec
"""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

load_dotenv()

# ---------------------------------------------------------------------------
# File extension → format name
# ---------------------------------------------------------------------------

EXTENSION_FORMATS: dict[str, str] = {
    ".csv": "csv",
    ".txt": "txt",
    ".bin": "bin",
}

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

KNOWN_FORMATS = tuple(EXTENSION_FORMATS.values())
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_choice(name: str, default: str, choices: tuple[str, ...]) -> str:
    """Read an env var and normalise it to one of ``choices``.

    The value is stripped and matched case-insensitively. An unknown
    value is logged and replaced by ``default``, so a typo in .env never
    stops the CLI from starting.
    """
    raw = os.getenv(name, default).strip()
    for choice in choices:
        if raw.lower() == choice.lower():
            return choice
    logger.warning("Ignoring %s=%r: expected one of %s", name, raw, ", ".join(choices))
    return default


DEFAULT_FORMAT = _env_choice("YPBANK_DEFAULT_FORMAT", "csv", KNOWN_FORMATS)
"""Format used when a path has no recognised extension, or for stdin/stdout."""

LOG_LEVEL = _env_choice("YPBANK_LOG_LEVEL", "WARNING", LOG_LEVELS)
"""Root log level applied by the CLI."""
