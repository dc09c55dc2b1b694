from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Logger:
    emit: Callable[[str], None]
    prefix: str = ""

    def info(self, msg: str) -> None:
        self.emit(self.prefix + msg)

    def warning(self, msg: str) -> None:
        self.emit(self.prefix + "warning: " + msg)
