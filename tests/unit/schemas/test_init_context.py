"""Unit tests for the init snapshot models."""

from pixel_relay.schemas.context import DEFAULT_AFFILIATION, InitData, PageContext, ShopInfo


class TestInitData:
    """Tests for InitData.from_raw."""

    def test_full_snapshot(self, init_payload):
        init = InitData.from_raw(init_payload)
        assert init.shop == ShopInfo(name="Example Store", currency="AUD")
        assert init.page == PageContext(
            href="https://shop.example/", referrer="", title="Example Store"
        )
        assert init.customer_privacy["analyticsProcessingAllowed"] is True

    def test_window_location_fallback(self):
        raw = {"context": {"window": {"location": {"href": "https://w.example/"}}}}
        init = InitData.from_raw(raw)
        assert init.page.href == "https://w.example/"

    def test_malformed_snapshot(self):
        for raw in (None, "init", {"data": "shop"}, {"customerPrivacy": ["x"]}):
            init = InitData.from_raw(raw)
            assert init.shop == ShopInfo()
            assert init.customer_privacy == {}


class TestAffiliation:
    """Tests for InitData.affiliation."""

    def test_configured_wins(self, init_payload):
        assert InitData.from_raw(init_payload).affiliation("Flagship") == "Flagship"

    def test_shop_name(self, init_payload):
        assert InitData.from_raw(init_payload).affiliation() == "Example Store"

    def test_generic_label(self):
        assert InitData().affiliation() == DEFAULT_AFFILIATION == "Shopify Store"
