from typing import Any, Optional


class LoaderError(Exception):
    """A profile lookup failed: network error, bad status or unusable body."""

    def __init__(self, key: Any, message: str, status: Optional[int] = None):
        self.key = key
        self.status = status
        super().__init__(f"{message} (key={key}, status={status})")
