"""
Parent control providers.

Guardian integrations report controls under several key spellings;
normalize_parent_controls() folds them into ParentControls.

The app wires SettingsParentControlProvider. GuardianIntegrationProvider is
the integration point for host code that has a guardian service.
"""

from typing import Any, Awaitable, Callable, Mapping, Optional

from playgate.config import Settings
from playgate.engines.policy.types import ParentControls, TimeWindow
from playgate.logging_config import get_logger
from playgate.providers.errors import ProviderUnavailable

logger = get_logger(__name__)

RawControls = Optional[Mapping[str, Any]]
FetchControls = Callable[[int], Awaitable[RawControls]]

_WINDOW_KEY_PAIRS = (
    ("allowed_start", "allowed_end"),
    ("time_start", "time_end"),
)


def _first(raw: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return default


def _extract_window(raw: Mapping[str, Any]) -> Optional[TimeWindow]:
    for nested_key in ("time_restrictions", "access_window"):
        nested = raw.get(nested_key)
        if isinstance(nested, Mapping) and nested.get("start") and nested.get("end"):
            return TimeWindow(start=str(nested["start"]), end=str(nested["end"]))

    for start_key, end_key in _WINDOW_KEY_PAIRS:
        if raw.get(start_key) and raw.get(end_key):
            return TimeWindow(start=str(raw[start_key]), end=str(raw[end_key]))
    return None


def normalize_parent_controls(raw: RawControls) -> ParentControls:
    """Map a raw guardian payload to ParentControls. Empty or None gives neutral defaults."""
    if not raw:
        return ParentControls()
    return ParentControls(
        games_blocked=bool(_first(raw, "games_blocked", "block_games", default=False)),
        time_restrictions=_extract_window(raw),
        require_tickets=bool(_first(raw, "require_tickets", "tickets_required", default=False)),
    )


class SettingsParentControlProvider:
    """Site-wide controls from configuration. Returns None when disabled."""

    def __init__(self, settings: Settings):
        self.settings = settings

    async def get_controls(self, user_id: int) -> Optional[ParentControls]:
        if not self.settings.parent_controls_enabled:
            return None
        return normalize_parent_controls({
            "block_games": self.settings.parent_block_games,
            "time_start": self.settings.parent_time_start,
            "time_end": self.settings.parent_time_end,
            "require_tickets": self.settings.parent_require_tickets,
        })


class GuardianIntegrationProvider:
    """
    Adapts a guardian integration's fetch function. Pass it to
    ContextBuilder with SettingsParentControlProvider as the fallback.

    When the integration has no data for the user (None) the fallback
    provider is consulted. Any integration failure surfaces as
    ProviderUnavailable so the context builder can use neutral defaults.
    """

    def __init__(self, fetch: FetchControls, fallback: Optional[Any] = None):
        self.fetch = fetch
        self.fallback = fallback

    async def get_controls(self, user_id: int) -> Optional[ParentControls]:
        try:
            raw = await self.fetch(user_id)
        except Exception as exc:
            raise ProviderUnavailable(f"guardian integration failed: {exc}") from exc

        if raw is None:
            if self.fallback is not None:
                return await self.fallback.get_controls(user_id)
            return None
        return normalize_parent_controls(raw)
