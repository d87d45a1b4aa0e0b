import pytest

from pagewarden.inference.core.dismissal.consent_resolver import (
    direct_injection_allowed,
    resolve,
)
from pagewarden.inference.infra.page_scripts import PageScript
from tests.fakes import FakeClickError, FakeElement, FakePage

DECLINE = 'xpath=//button[contains(text(), "Decline")]'
ONETRUST = "#onetrust-reject-all-handler"
FRENCH_REFUSE = 'xpath=//button[contains(text(), "Refuser")]'


@pytest.mark.asyncio
async def test_no_banner_is_a_no_op_and_idempotent(page, catalog):
    assert await resolve(page, catalog) is False
    assert await resolve(page, catalog) is False
    assert page.clicked == []
    assert page.scripts == []


@pytest.mark.asyncio
async def test_scoped_sweep_rejects_inside_cookie_banner(page, catalog, caplog):
    banner = page.add("div#cookie-banner", FakeElement())
    decline = banner.add(DECLINE, FakeElement(dismisses=[banner]))

    with caplog.at_level("INFO", logger="pagewarden"):
        assert await resolve(page, catalog) is True

    assert decline.clicks == 1
    assert "Rejected cookies using: Generic Decline Button" in caplog.text
    assert "scoped sweep in div#cookie-banner" in caplog.text

    assert await resolve(page, catalog) is False


@pytest.mark.asyncio
async def test_locale_phase_wins_over_generic_reject(page, catalog):
    locale = page.add("#bnp_btn_refuse", FakeElement())
    generic = page.add(ONETRUST, FakeElement())

    assert await resolve(page, catalog) is True

    assert locale.forced_clicks == 1
    assert generic.clicks == 0


@pytest.mark.asyncio
async def test_locale_phase_falls_back_to_script_click(page, catalog):
    refuse = page.add(
        FRENCH_REFUSE, FakeElement(click_error=FakeClickError("intercepted"))
    )

    assert await resolve(page, catalog) is True

    assert refuse.clicks == 0
    assert refuse.script_clicks == 1
    assert PageScript.CLICK_BY_XPATH in page.scripts


@pytest.mark.asyncio
async def test_text_banner_phase(page, catalog):
    banner = catalog.text_banners[0]
    page.add(banner.detect.selector, FakeElement())
    refuse = page.add(banner.reject.selector, FakeElement())

    assert await resolve(page, catalog) is True
    assert refuse.forced_clicks == 1


@pytest.mark.asyncio
async def test_global_sweep_when_no_container_matches(page, catalog, caplog):
    button = page.add(ONETRUST, FakeElement())

    with caplog.at_level("INFO", logger="pagewarden"):
        assert await resolve(page, catalog) is True

    assert button.clicks == 1
    assert "OneTrust Reject All (global sweep)" in caplog.text


@pytest.mark.asyncio
async def test_iframe_fallback(page, catalog):
    page.add("div#cookie-banner", FakeElement())
    frame = page.add_frame("https://cmp.example.net/consent/notice")
    button = frame.add(ONETRUST, FakeElement())
    unrelated = page.add_frame("https://ads.example.net/slot")
    ignored = unrelated.add(ONETRUST, FakeElement())

    assert await resolve(page, catalog) is True

    assert button.clicks == 1
    assert ignored.clicks == 0


@pytest.mark.asyncio
async def test_direct_injection_on_known_domain(bing_page, catalog):
    banner = bing_page.add("#bnp_container", FakeElement())

    assert await resolve(bing_page, catalog) is True

    assert bing_page.storage["MSCC"] == "cid=necessary"
    assert any(cookie.startswith("MUID=") for cookie in bing_page.cookies)
    assert banner.hidden is True


@pytest.mark.asyncio
async def test_direct_injection_can_be_disabled(bing_page, catalog):
    assert await resolve(bing_page, catalog, allow_direct_injection=False) is False
    assert bing_page.storage == {}


def test_direct_injection_is_site_restricted():
    assert direct_injection_allowed("https://www.bing.com/")
    assert not direct_injection_allowed("https://example.com/")


class BrokenFramesPage(FakePage):
    @property
    def frames(self):
        raise RuntimeError("target closed")


@pytest.mark.asyncio
async def test_failing_phase_is_logged_and_skipped(catalog, caplog):
    page = BrokenFramesPage()

    with caplog.at_level("WARNING", logger="pagewarden"):
        assert await resolve(page, catalog) is False

    assert "Error in iframe phase: target closed" in caplog.text
