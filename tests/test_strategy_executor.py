import time

import pytest

from pagewarden.inference.core.dismissal.strategy_executor import (
    attempt_locator,
    click_first_visible,
    run_batch,
)
from pagewarden.schema.locator import css, xpath
from tests.fakes import FakeClickError, FakeElement

ACCEPT = css("#acceptButton", "AcceptButton")
NEXT = css("#iNext", "iNext")
SLOW = css("#slow", "Slow")
BROKEN = css("#broken", "Broken")


@pytest.mark.asyncio
async def test_batch_succeeds_when_any_locator_acts(page):
    button = page.add(ACCEPT.selector, FakeElement())

    assert await run_batch(page, [NEXT, ACCEPT], 0.2) is True
    assert button.clicks == 1


@pytest.mark.asyncio
async def test_batch_without_matches_is_false(page):
    assert await run_batch(page, [NEXT, ACCEPT], 0.2) is False
    assert await run_batch(page, [], 0.2) is False


@pytest.mark.asyncio
async def test_invisible_element_is_not_clicked(page):
    hidden = page.add(ACCEPT.selector, FakeElement(visible=False))

    assert await run_batch(page, [ACCEPT], 0.2) is False
    assert hidden.clicks == 0


@pytest.mark.asyncio
async def test_hanging_locator_does_not_stall_the_batch(page):
    page.add(SLOW.selector, FakeElement(hang=True))
    page.add(BROKEN.selector, FakeElement(click_error=FakeClickError("intercepted")))
    button = page.add(NEXT.selector, FakeElement())

    started = time.monotonic()
    result = await run_batch(page, [SLOW, BROKEN, NEXT], 0.2)
    elapsed = time.monotonic() - started

    assert result is True
    assert button.clicks == 1
    # bounded by one per-action timeout, not by the number of locators
    assert elapsed < 0.5


@pytest.mark.asyncio
async def test_attempt_records_timeout_and_click_errors(page):
    page.add(SLOW.selector, FakeElement(hang=True))
    page.add(BROKEN.selector, FakeElement(click_error=FakeClickError("intercepted")))

    slow = await attempt_locator(page, SLOW, 0.05, "TEST")
    broken = await attempt_locator(page, BROKEN, 0.05, "TEST")

    assert slow.acted is False and "timed out" in slow.error
    assert broken.matched is True
    assert broken.acted is False
    assert broken.error == "intercepted"


@pytest.mark.asyncio
async def test_batch_logs_dismissed_label(page, caplog):
    page.add(ACCEPT.selector, FakeElement())

    with caplog.at_level("INFO", logger="pagewarden"):
        await run_batch(page, [ACCEPT], 0.2)

    assert "[DISMISS-ALL-MESSAGES] Dismissed: AcceptButton" in caplog.text


@pytest.mark.asyncio
async def test_click_first_visible_follows_priority_order(page):
    first = xpath('//button[contains(text(), "Reject")]', "Reject")
    second = css("#reject-all", "Reject All ID")
    later = page.add(second.selector, FakeElement())
    earlier = page.add(first.selector, FakeElement())

    outcome = await click_first_visible(page, [first, second], 0.2)

    assert outcome.attempted == first
    assert earlier.clicks == 1
    assert later.clicks == 0


@pytest.mark.asyncio
async def test_click_first_visible_skips_invisible_and_reports_failed_click(page):
    page.add(NEXT.selector, FakeElement(visible=False))
    page.add(BROKEN.selector, FakeElement(click_error=FakeClickError("detached")))

    outcome = await click_first_visible(page, [NEXT, BROKEN], 0.2)

    assert outcome.attempted == BROKEN
    assert outcome.acted is True
    assert outcome.error == "detached"
    assert await click_first_visible(page, [NEXT], 0.2) is None


@pytest.mark.asyncio
async def test_batch_warns_when_visible_element_cannot_be_clicked(page, caplog):
    page.add(BROKEN.selector, FakeElement(click_error=FakeClickError("intercepted")))

    with caplog.at_level("WARNING", logger="pagewarden"):
        assert await run_batch(page, [BROKEN], 0.2) is False

    warnings = [r for r in caplog.records if r.levelname == "WARNING"]
    assert any("Broken was visible but not clicked: intercepted" in r.message for r in warnings)
