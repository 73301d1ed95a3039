"""Strategy catalog — the ordered client identities tried per operation.

The catalog is static configuration built once at startup.  Iteration
order is the declared order; nothing here reorders strategies based on
past successes or failures.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from yt_relay.core.models import Operation, Strategy

DEFAULT_CLIENTS: tuple[str, ...] = (
    "android_sdkless",
    "android",
    "ios",
    "tv_embedded",
    "mweb",
)
"""Client identities in priority order."""

DEFAULT_PLAYER_SKIP: str = "webpage"
"""Skips the web player so cookies do not push yt-dlp onto the web client."""

FALLBACK_STRATEGY: Strategy = Strategy(name="default")


class StrategyCatalog:
    """Ordered strategies per :class:`Operation` plus one fallback.

    Parameters
    ----------
    strategies:
        Explicit strategies for each operation.  An operation without an
        entry has no explicit strategies and goes straight to the
        fallback.
    fallback:
        The strategy tried once after every explicit one has failed.
    """

    def __init__(
        self,
        strategies: Mapping[Operation, Iterable[Strategy]],
        *,
        fallback: Strategy = FALLBACK_STRATEGY,
    ) -> None:
        self._strategies: dict[Operation, tuple[Strategy, ...]] = {
            operation: tuple(items) for operation, items in strategies.items()
        }
        self._fallback: Strategy = fallback

    @property
    def fallback(self) -> Strategy:
        return self._fallback

    def strategies_for(self, operation: Operation) -> tuple[Strategy, ...]:
        """Return the explicit strategies for *operation*, in order."""
        return self._strategies.get(operation, ())

    def sequence_for(self, operation: Operation) -> Iterator[Strategy]:
        """Yield the explicit strategies followed by the fallback."""
        yield from self.strategies_for(operation)
        yield self._fallback


def client_strategies(
    clients: Iterable[str],
    *,
    player_skip: str | None = DEFAULT_PLAYER_SKIP,
) -> tuple[Strategy, ...]:
    """Build one forced-client strategy per name in *clients*."""
    strategies: list[Strategy] = []
    for client in clients:
        params = {"player_client": client}
        if player_skip:
            params["player_skip"] = player_skip
        strategies.append(Strategy.from_mapping(client, params))
    return tuple(strategies)


def default_catalog(
    clients: Iterable[str] = DEFAULT_CLIENTS,
    *,
    player_skip: str | None = DEFAULT_PLAYER_SKIP,
) -> StrategyCatalog:
    """Return a catalog using the same client list for both operations."""
    strategies = client_strategies(clients, player_skip=player_skip)
    return StrategyCatalog(
        {
            Operation.METADATA: strategies,
            Operation.EXTRACTION: strategies,
        },
    )
