"""
Event Dispatcher.

Connects the storefront event bus to the mapping functions and the sink.

Usage:
    from pixel_relay.dispatcher import EventDispatcher
    from pixel_relay.sinks import MemorySink

    dispatcher = EventDispatcher.from_settings(settings, MemorySink(), init=raw_init)
    dispatcher.subscribe(analytics, customer_privacy)

The dispatcher is the fault boundary: whatever a mapper or the sink raises is
logged and the event dropped, so the host page never sees an exception.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Union

from pixel_relay.configs.settings import Settings
from pixel_relay.consent import ConsentTracker
from pixel_relay.mapping.mappers import MappingContext
from pixel_relay.mapping.registry import EventRoute, build_routes
from pixel_relay.monitoring.logging import DEBUG_LOGGER, emit_event
from pixel_relay.schemas.consent import ConsentSignals
from pixel_relay.schemas.context import InitData
from pixel_relay.schemas.event import CanonicalEvent, StorefrontEvent
from pixel_relay.sinks import CONSENT_UPDATE, EventSink

logger = logging.getLogger(__name__)
debug_logger = logging.getLogger(DEBUG_LOGGER)

CONSENT_NOTIFICATION = "visitorConsentCollected"


class EventBus(Protocol):
    """Minimal publish/subscribe facility the relay consumes."""

    def subscribe(self, name: str, callback: Callable[[Any], Any]) -> Any: ...


class EventDispatcher:
    """
    Route storefront events through their mapper to the sink.

    Routes are selected once, at construction, from the category toggles.
    """

    def __init__(
        self,
        sink: EventSink,
        *,
        context: Optional[MappingContext] = None,
        consent: Optional[ConsentTracker] = None,
        toggles: Optional[Mapping[str, bool]] = None,
        debug: bool = False,
    ):
        """
        Initialize the dispatcher.

        Args:
            sink: Destination for canonical events and consent updates
            context: Page, currency and affiliation values for the mappers
            consent: Process-wide consent holder; a fresh one when omitted
            toggles: Category name -> enabled flag
            debug: Mirror every emitted event to the debug logger
        """
        self.sink = sink
        self.context = context or MappingContext()
        self.consent = consent or ConsentTracker()
        self.routes: Dict[str, EventRoute] = build_routes(toggles or {})
        self.debug = debug

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        sink: EventSink,
        init: Union[InitData, Mapping[str, Any], None] = None,
    ) -> "EventDispatcher":
        """
        Build a dispatcher from settings and the storefront init snapshot.

        Args:
            settings: Relay settings (toggles, affiliation, currency, debug)
            sink: Destination sink
            init: Parsed ``InitData`` or the raw init payload

        Returns:
            Configured EventDispatcher
        """
        if not isinstance(init, InitData):
            init = InitData.from_raw(init)

        context = MappingContext(
            page=init.page,
            shop_currency=init.shop.currency,
            fallback_currency=settings.DEFAULT_CURRENCY,
            affiliation=init.affiliation(settings.AFFILIATION),
        )
        logger.info(
            f"Initialized - sending to {settings.SERVER_CONTAINER_URL or '<unset>'} "
            f"(measurement id {settings.MEASUREMENT_ID or '<unset>'})"
        )
        return cls(
            sink,
            context=context,
            consent=ConsentTracker.from_snapshot(init.customer_privacy),
            toggles=settings.tracking_toggles(),
            debug=settings.DEBUG,
        )

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def subscribe(
        self,
        analytics: EventBus,
        customer_privacy: Optional[EventBus] = None,
    ) -> List[str]:
        """
        Register one handler per enabled route, plus the consent handler.

        Args:
            analytics: Bus delivering storefront lifecycle events
            customer_privacy: Bus delivering consent notifications, if available

        Returns:
            Names subscribed to, in registration order
        """
        subscribed = []
        for name in self.routes:
            analytics.subscribe(name, functools.partial(self.dispatch, name))
            subscribed.append(name)

        if customer_privacy is not None:
            customer_privacy.subscribe(CONSENT_NOTIFICATION, self.handle_consent)
            subscribed.append(CONSENT_NOTIFICATION)

        logger.info(f"Subscribed to {len(subscribed)} storefront events")
        return subscribed

    # ------------------------------------------------------------------
    # Handling
    # ------------------------------------------------------------------

    def map_event(
        self,
        event_name: Union[str, StorefrontEvent],
        raw_event: Any,
    ) -> Optional[CanonicalEvent]:
        """
        Map a raw event without sending it.

        Returns None for unknown or disabled events and for suppressed ones.
        Mapper exceptions propagate.
        """
        name = event_name.value if isinstance(event_name, StorefrontEvent) else event_name
        route = self.routes.get(name)
        if route is None:
            logger.debug(f"No enabled route for '{name}'")
            return None
        return route.mapper(raw_event, self.context)

    def dispatch(
        self,
        event_name: Union[str, StorefrontEvent],
        raw_event: Any,
    ) -> Optional[CanonicalEvent]:
        """
        Map a raw event and hand the result to the sink.

        Returns:
            The emitted event, or None when nothing was emitted
        """
        try:
            canonical = self.map_event(event_name, raw_event)
        except Exception:
            logger.exception(f"Failed to map storefront event '{event_name}'")
            return None

        if canonical is None:
            return None

        if self.debug:
            emit_event(debug_logger, canonical.name, canonical.to_params())

        try:
            self.sink.send_event(canonical)
        except Exception:
            logger.exception(f"Sink rejected '{canonical.name}'")
            return None
        return canonical

    def handle_consent(self, notification: Any) -> Optional[ConsentSignals]:
        """
        Overwrite the consent state and send the fresh signals.

        Returns:
            The signals sent, or None when the notification was unreadable
        """
        signals = self.consent.update(notification)
        if signals is None:
            return None

        if self.debug:
            emit_event(debug_logger, "consent_update", signals.to_params())

        try:
            self.sink.send_consent(signals, CONSENT_UPDATE)
        except Exception:
            logger.exception("Sink rejected consent update")
            return None
        return signals
