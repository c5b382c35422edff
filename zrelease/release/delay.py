"""The pause between the last check and the first irreversible step.

The operator gets a few seconds to read the summary and hit Ctrl-C.
`CountdownDelay` turns that interrupt into `ReleaseCancelled`; tests use
`NoDelay` or a delay whose sleep raises KeyboardInterrupt.
"""

from __future__ import annotations

import math
import time
from collections.abc import Callable
from typing import Protocol

from zrelease.core.result import Err, Ok, Result
from zrelease.output.console import ConsoleProtocol, Style
from zrelease.release.errors import ReleaseCancelled


class Delay(Protocol):
    def wait(self, seconds: float) -> Result[None, ReleaseCancelled]: ...


class CountdownDelay:
    def __init__(
        self,
        *,
        console: ConsoleProtocol,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._console = console
        self._sleep = sleep

    def wait(self, seconds: float) -> Result[None, ReleaseCancelled]:
        if seconds <= 0:
            return Ok(None)

        self._console.warning(
            f"tagging and publishing in {math.ceil(seconds)} seconds; press Ctrl-C to abort"
        )
        remaining = float(seconds)
        try:
            while remaining > 0:
                whole = math.ceil(remaining)
                if whole % 5 == 0 or whole <= 3:
                    self._console.print(f"{whole}...", Style.DIM)
                step = min(1.0, remaining)
                self._sleep(step)
                remaining -= step
        except KeyboardInterrupt:
            return Err(ReleaseCancelled())
        return Ok(None)


class NoDelay:
    def wait(self, seconds: float) -> Result[None, ReleaseCancelled]:
        del seconds
        return Ok(None)
