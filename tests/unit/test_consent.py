"""
Unit tests for the consent module.

Tests for translate_consent, notification parsing and ConsentTracker.
"""

import pytest

from pixel_relay.consent import ConsentTracker, parse_consent_notification, translate_consent
from pixel_relay.schemas.consent import ConsentState


class TestTranslateConsent:
    """Tests for translate_consent."""

    def test_mixed_consent(self):
        state = ConsentState.model_validate(
            {
                "analyticsProcessingAllowed": True,
                "marketingAllowed": False,
                "preferencesProcessingAllowed": True,
            }
        )
        assert translate_consent(state).to_params() == {
            "analytics_storage": "granted",
            "ad_storage": "denied",
            "ad_personalization": "granted",
            "ad_user_data": "denied",
        }

    def test_marketing_drives_two_signals(self):
        signals = translate_consent(ConsentState(marketing_allowed=True))
        assert signals.ad_storage == "granted"
        assert signals.ad_user_data == "granted"
        assert signals.analytics_storage == "denied"
        assert signals.ad_personalization == "denied"

    def test_default_state_denies_everything(self):
        assert set(translate_consent(ConsentState()).to_params().values()) == {"denied"}


class TestParseNotification:
    """Tests for parse_consent_notification."""

    def test_wrapped_notification(self):
        state = parse_consent_notification({"customerPrivacy": {"marketingAllowed": True}})
        assert state.marketing_allowed is True
        assert state.analytics_allowed is False

    def test_bare_payload(self):
        state = parse_consent_notification({"analyticsProcessingAllowed": True})
        assert state.analytics_allowed is True

    def test_null_flags(self):
        state = parse_consent_notification({"analyticsProcessingAllowed": None})
        assert state.analytics_allowed is False

    @pytest.mark.parametrize(
        "notification",
        [None, "granted", {"customerPrivacy": None}, {"marketingAllowed": "maybe"}],
    )
    def test_unreadable(self, notification):
        assert parse_consent_notification(notification) is None


class TestConsentTracker:
    """Tests for ConsentTracker."""

    def test_from_snapshot(self, init_payload):
        tracker = ConsentTracker.from_snapshot(init_payload["customerPrivacy"])
        assert tracker.state.analytics_allowed is True
        assert tracker.signals.analytics_storage == "granted"

    def test_from_empty_snapshot(self):
        tracker = ConsentTracker.from_snapshot(None)
        assert tracker.state == ConsentState()

    def test_update_overwrites(self):
        """Each notification replaces the state; nothing is merged."""
        tracker = ConsentTracker()
        tracker.update(
            {"customerPrivacy": {"analyticsProcessingAllowed": True, "marketingAllowed": True}}
        )
        signals = tracker.update({"customerPrivacy": {"preferencesProcessingAllowed": True}})

        assert tracker.state == ConsentState(personalization_allowed=True)
        assert signals.analytics_storage == "denied"
        assert signals.ad_storage == "denied"
        assert signals.ad_personalization == "granted"

    def test_malformed_update_keeps_state(self):
        tracker = ConsentTracker(ConsentState(analytics_allowed=True))
        assert tracker.update("garbage") is None
        assert tracker.state.analytics_allowed is True
