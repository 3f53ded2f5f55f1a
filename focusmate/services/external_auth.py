"""External identity providers. Only a mock ships; real OAuth is not implemented."""
import asyncio
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class ExternalIdentity:
    email: str
    name: str


class ExternalIdentityProvider(Protocol):
    name: str

    async def authenticate(self) -> ExternalIdentity: ...


class MockGoogleProvider:
    """Simulates the Google sign-in popup: fixed delay, canned identity."""

    name = "google"

    def __init__(
        self,
        delay_seconds: float = 0.8,
        email: str = "demo.user@gmail.com",
        display_name: str = "Demo User",
    ):
        self.delay_seconds = delay_seconds
        self.identity = ExternalIdentity(email=email, name=display_name)

    async def authenticate(self) -> ExternalIdentity:
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)
        return self.identity
