# audiokit/printer.py
# Console output for the audiokit CLI: results on stdout, problems on stderr.

import os
import sys
from typing import Optional

from audiokit.core import Audio


class OutputPrinter:
    """
    Formatter for CLI output.

    Each message is one symbol-led line, optionally followed by an indented
    detail block or a ``→`` hint. Color is optional and honors NO_COLOR.
    """

    SYMBOLS : dict[str, str] = {
        "success" : "✅",
        "error"   : "❌",
        "warning" : "⚠️ ",
        "hint"    : "→",
    }

    COLORS : dict[str, str] = {
        "green"  : "32",
        "red"    : "31",
        "yellow" : "33",
        "cyan"   : "36",
        "dim"    : "90",
    }

    COL_WIDTH : int = 12

    def __init__(self, quiet : bool = False, no_color : bool = False) -> None:
        self.quiet    : bool = quiet
        self.no_color : bool = no_color or bool(os.environ.get("NO_COLOR", ""))

    def _colorize(self, text : str, code : str) -> str:
        if self.no_color:
            return text
        return f"\033[{code}m{text}\033[0m"

    def _hint(self, hint : str) -> str:
        return self._colorize(f"{self.SYMBOLS['hint']} {hint}", self.COLORS["cyan"])

    @staticmethod
    def describe(audio : Audio) -> dict[str, str]:
        """Detail block for one audio object."""
        return {
            "Channels"    : str(audio.channels),
            "Sample rate" : f"{audio.sample_rate} Hz",
            "Length"      : f"{audio.length} frames",
            "Duration"    : f"{audio.duration:.3f}s",
        }

    def success(self, title : str, details : Optional[dict[str, str]] = None) -> None:
        if self.quiet:
            return
        symbol : str = self._colorize(self.SYMBOLS["success"], self.COLORS["green"])
        print(f"\n{symbol}  {self._colorize(title, self.COLORS['green'])}")
        for key, value in (details or {}).items():
            dim_key : str = self._colorize(f"{key:<{self.COL_WIDTH}}", self.COLORS["dim"])
            print(f"    {dim_key}: {value}")

    def error(self, message : str, hint : Optional[str] = None) -> None:
        """Errors always go to stderr, even in quiet mode."""
        symbol : str = self._colorize(self.SYMBOLS["error"], self.COLORS["red"])
        print(f"\n{symbol}  {self._colorize(message, self.COLORS['red'])}", file=sys.stderr)
        if hint:
            print(f"    {self._hint(hint)}", file=sys.stderr)

    def warning(self, message : str, hint : Optional[str] = None) -> None:
        if self.quiet:
            return
        symbol : str = self._colorize(self.SYMBOLS["warning"], self.COLORS["yellow"])
        print(f"\n{symbol} {self._colorize(message, self.COLORS['yellow'])}")
        if hint:
            print(f"    {self._hint(hint)}")
