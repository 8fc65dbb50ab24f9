"""Connection settings for the time-entries API."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class TransportConfig:
    """
    Settings for TimeEntriesTransport.

    base_url points at the API proxy (e.g. "https://tracker.example.com");
    session_token is sent in session_header with every request.
    """

    base_url: str
    session_token: str
    timeout_sec: float = 30.0
    session_header: str = "x-toggl-session-token"

    def __post_init__(self) -> None:
        for name in ("base_url", "session_token", "session_header"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"TransportConfig.{name} must be a non-empty string")

        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError("TransportConfig.base_url must start with http:// or https://")

        if self.timeout_sec <= 0:
            raise ValueError("TransportConfig.timeout_sec must be > 0")

    def __repr__(self) -> str:
        return (
            f"TransportConfig(base_url={self.base_url!r}, session_token='***', "
            f"timeout_sec={self.timeout_sec!r}, session_header={self.session_header!r})"
        )
