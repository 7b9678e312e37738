"""Chainable log lines with level prefixes, plus one-shot helpers."""

from __future__ import annotations

import sys
from typing import TextIO


class Log:
    """Builds one log line piece by piece and writes it on ``show()``."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self._parts: list[str] = []

    def text(self, value: object) -> "Log":
        self._parts.append(str(value))
        return self

    def sp(self) -> "Log":
        self._parts.append(" ")
        return self

    def hex(self, value: int, width: int = 0) -> "Log":
        value &= 0xFFFFFFFF
        digits = f"{value:0{width}X}" if width > 0 else f"{value:X}"
        self._parts.append("0x" + digits)
        return self

    def num(self, value: int) -> "Log":
        self._parts.append(str(int(value)))
        return self

    def render(self) -> str:
        """Return the line built so far without writing it."""
        return "".join(self._parts)

    def show(self) -> None:
        """Write the line followed by a newline and start a fresh one."""
        stream = self._stream if self._stream is not None else sys.stdout
        stream.write(self.render() + "\n")
        stream.flush()
        self._parts.clear()

    @classmethod
    def _tagged(cls, level: str, tag: str, stream: TextIO) -> "Log":
        return cls(stream).text(f"[{level}][{tag}] ")

    @classmethod
    def err(cls, tag: str) -> "Log":
        return cls._tagged("ERROR", tag, sys.stderr)

    @classmethod
    def wrn(cls, tag: str) -> "Log":
        return cls._tagged("WARN", tag, sys.stdout)

    @classmethod
    def inf(cls, tag: str) -> "Log":
        return cls._tagged("INFO", tag, sys.stdout)

    @classmethod
    def dbg(cls, tag: str) -> "Log":
        return cls._tagged("DEBUG", tag, sys.stdout)

    @classmethod
    def trc(cls, tag: str) -> "Log":
        return cls._tagged("TRACE", tag, sys.stdout)


def info(message: str) -> None:
    print(f"[INFO] {message}", file=sys.stdout)


def debug(message: str) -> None:
    print(f"[DEBUG] {message}", file=sys.stdout)


def warning(message: str) -> None:
    print(f"[WARNING] {message}", file=sys.stdout)


def error(message: str) -> None:
    print(f"[ERROR] {message}", file=sys.stderr)