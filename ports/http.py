from __future__ import annotations

from typing import Any, Optional, Protocol


class HttpSessionPort(Protocol):
    def get(self, url: str, timeout: Optional[float] = None) -> Any:
        ...
