"""
Consent translation.

The storefront reports three consent flags; the collection endpoint expects
four signals. Marketing consent drives both ``ad_storage`` and
``ad_user_data``.

``ConsentTracker`` holds the one process-wide consent value. It has a single
writer (the dispatcher's consent handler); each notification replaces the
previous state outright and nothing is queued or merged.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from pixel_relay.schemas.consent import ConsentSignals, ConsentState, ConsentValue

logger = logging.getLogger(__name__)


def translate_consent(state: ConsentState) -> ConsentSignals:
    """Derive the four consent signals from a consent state."""
    return ConsentSignals(
        analytics_storage=ConsentValue.from_flag(state.analytics_allowed),
        ad_storage=ConsentValue.from_flag(state.marketing_allowed),
        ad_personalization=ConsentValue.from_flag(state.personalization_allowed),
        ad_user_data=ConsentValue.from_flag(state.marketing_allowed),
    )


def parse_consent_notification(notification: Any) -> Optional[ConsentState]:
    """
    Extract the consent state from a ``visitorConsentCollected`` notification.

    Accepts the full notification (``{"customerPrivacy": {...}}``) or the bare
    privacy mapping. Returns None when the payload cannot be read.
    """
    if not isinstance(notification, Mapping):
        return None
    payload = notification.get("customerPrivacy", notification)
    if not isinstance(payload, Mapping):
        return None
    try:
        return ConsentState.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"Ignoring malformed consent payload: {e}")
        return None


class ConsentTracker:
    """
    Current visitor consent, overwritten on every notification.

    Not thread-safe; only the dispatcher writes to it.
    """

    def __init__(self, initial: Optional[ConsentState] = None):
        self._state = initial or ConsentState()

    @classmethod
    def from_snapshot(cls, customer_privacy: Optional[Mapping[str, Any]]) -> "ConsentTracker":
        """Seed from the init snapshot's ``customerPrivacy`` mapping."""
        return cls(parse_consent_notification(customer_privacy or {}))

    @property
    def state(self) -> ConsentState:
        return self._state

    @property
    def signals(self) -> ConsentSignals:
        return translate_consent(self._state)

    def update(self, notification: Any) -> Optional[ConsentSignals]:
        """
        Replace the state from a notification and return the new signals.

        A malformed notification leaves the state untouched and returns None.
        """
        state = parse_consent_notification(notification)
        if state is None:
            return None
        self._state = state
        return translate_consent(state)
