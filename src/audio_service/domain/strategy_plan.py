"""Ordering of extraction strategies."""

from mytube_common import ClientIdentity
from pydantic import BaseModel

from .models import ExtractionStrategy

DEFAULT_MAX_ATTEMPTS = 6

# Identities that accept cookies, most resistant to bot checks first.
CREDENTIALED_CLIENTS: tuple[ClientIdentity, ...] = (
    ClientIdentity.TV,
    ClientIdentity.WEB_SAFARI,
    ClientIdentity.MWEB,
)

ALL_CLIENTS: tuple[ClientIdentity, ...] = (
    ClientIdentity.IOS,
    ClientIdentity.ANDROID_VR,
    ClientIdentity.TV,
    ClientIdentity.WEB_SAFARI,
    ClientIdentity.MWEB,
    ClientIdentity.ANDROID,
    ClientIdentity.WEB,
)


class StrategyPlan(BaseModel, frozen=True):
    """Priority-ordered, capped list of strategies."""

    strategies: tuple[ExtractionStrategy, ...]

    def __len__(self) -> int:
        return len(self.strategies)

    @classmethod
    def build(
        cls,
        credentials_available: bool,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        credentialed_clients: tuple[ClientIdentity, ...] = CREDENTIALED_CLIENTS,
        all_clients: tuple[ClientIdentity, ...] = ALL_CLIENTS,
    ) -> "StrategyPlan":
        """
        Builds the plan for one extraction.

        With credentials, cookie-capable identities are tried with cookies
        first, then every identity without them. Without credentials only
        the anonymous attempts remain. The result never exceeds
        ``max_attempts`` entries.

        Args:
            credentials_available: Whether a cookie file can be supplied.
            max_attempts: Upper bound on the plan length.
            credentialed_clients: Identities tried with cookies.
            all_clients: Identities tried without cookies.

        Returns:
            The ordered plan.
        """
        candidates: list[ExtractionStrategy] = []
        if credentials_available:
            candidates.extend(
                ExtractionStrategy(use_credentials=True, client=client)
                for client in credentialed_clients
            )
        candidates.extend(
            ExtractionStrategy(use_credentials=False, client=client)
            for client in all_clients
        )

        unique = list(dict.fromkeys(candidates))
        return cls(strategies=tuple(unique[: max(max_attempts, 0)]))
