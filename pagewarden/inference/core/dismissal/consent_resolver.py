import asyncio
import logging
from typing import Awaitable, Callable

from playwright.async_api import Page

from pagewarden.inference.core.dismissal.strategy_executor import (
    click_first_visible,
    is_present_and_visible,
)
from pagewarden.inference.infra.page_scripts import (
    PageScript,
    click_via_script,
    run_page_script,
)
from pagewarden.schema.catalog import LocatorCatalog
from pagewarden.schema.locator import Locator
from pagewarden.utils.settings import settings

logger = logging.getLogger(__name__)

TAG = "COOKIES"

Phase = Callable[[Page, LocatorCatalog], Awaitable[bool]]


async def forced_click(page: Page, locator: Locator) -> None:
    """Forced structural click, falling back to a native click from page script."""
    try:
        await page.locator(locator.selector).first.click(
            timeout=settings.CLICK_TIMEOUT_SECONDS * 1000, force=True
        )
    except Exception as e:
        logger.warning(
            f"[{TAG}] Click on {locator.label} failed, using script click: {e}"
        )
        try:
            await click_via_script(page, locator)
        except Exception as script_error:
            logger.warning(
                f"[{TAG}] Script click on {locator.label} failed: {script_error}"
            )


async def reject_locale_buttons(page: Page, catalog: LocatorCatalog) -> bool:
    for locator in catalog.locale_reject():
        if not await is_present_and_visible(
            page, locator, settings.DISMISS_TIMEOUT_SECONDS
        ):
            continue
        await forced_click(page, locator)
        logger.info(f"[{TAG}] Rejected locale cookies using: {locator.label}")
        return True
    return False


async def reject_text_banners(page: Page, catalog: LocatorCatalog) -> bool:
    for banner in catalog.text_banners:
        if await page.locator(banner.detect.selector).count() == 0:
            continue
        logger.info(f"[{TAG}] Detected {banner.label}")

        if await page.locator(banner.reject.selector).count() == 0:
            continue
        await forced_click(page, banner.reject)
        logger.info(f"[{TAG}] Rejected {banner.label} via text detection")
        return True
    return False


async def reject_in_banner_containers(page: Page, catalog: LocatorCatalog) -> bool:
    for container in catalog.banner_containers:
        scope = page.locator(container.selector)
        if await scope.count() == 0:
            continue
        logger.info(f"[{TAG}] Detected cookie banner: {container.label}")

        outcome = await click_first_visible(
            scope, catalog.reject_cookies, settings.DISMISS_TIMEOUT_SECONDS
        )
        if outcome is not None:
            logger.info(
                f"[{TAG}] Rejected cookies using: {outcome.attempted.label} "
                f"(scoped sweep in {container.label})"
            )
            return True
    return False


async def reject_anywhere(page: Page, catalog: LocatorCatalog) -> bool:
    outcome = await click_first_visible(
        page, catalog.reject_cookies, settings.DISMISS_TIMEOUT_SECONDS
    )
    if outcome is None:
        return False
    logger.info(
        f"[{TAG}] Rejected cookies using: {outcome.attempted.label} (global sweep)"
    )
    return True


async def reject_in_frames(page: Page, catalog: LocatorCatalog) -> bool:
    for frame in page.frames:
        try:
            frame_url = frame.url
            if not any(
                keyword in frame_url for keyword in catalog.consent_frame_keywords
            ):
                continue
            logger.info(f"[{TAG}] Checking cookie iframe: {frame_url}")

            outcome = await click_first_visible(
                frame, catalog.reject_cookies, settings.DISMISS_TIMEOUT_SECONDS
            )
            if outcome is not None:
                logger.info(
                    f"[{TAG}] Rejected cookies in iframe using: {outcome.attempted.label}"
                )
                return True
        except Exception as e:
            logger.debug(f"[{TAG}] Skipping frame: {e}")
    return False


async def inject_preferences(page: Page, catalog: LocatorCatalog) -> bool:
    logger.info(
        f"[{TAG}] Attempting to bypass cookie banner by setting cookies directly"
    )
    injection = catalog.direct_injection
    await run_page_script(page, PageScript.SET_STORAGE, injection.storage)
    await run_page_script(page, PageScript.SET_COOKIES, injection.cookies)
    if injection.hide_selectors:
        await run_page_script(page, PageScript.HIDE_ELEMENTS, injection.hide_selectors)
    logger.info(f"[{TAG}] Successfully applied direct cookie preferences")
    return True


def direct_injection_allowed(url: str) -> bool:
    return any(domain in url for domain in settings.DIRECT_INJECTION_DOMAINS)


async def resolve(
    page: Page, catalog: LocatorCatalog, allow_direct_injection: bool = True
) -> bool:
    """Run the consent ladder once; True if a cookie banner was eliminated."""
    logger.debug(f"[{TAG}] Checking for cookie consent banners...")
    await asyncio.sleep(settings.BANNER_WAIT_SECONDS)

    phases: list[tuple[str, Phase]] = [
        ("locale", reject_locale_buttons),
        ("text banner", reject_text_banners),
        ("scoped sweep", reject_in_banner_containers),
        ("global sweep", reject_anywhere),
        ("iframe", reject_in_frames),
    ]
    if allow_direct_injection and direct_injection_allowed(page.url):
        phases.append(("direct injection", inject_preferences))

    for name, phase in phases:
        try:
            if await phase(page, catalog):
                return True
        except Exception as e:
            logger.warning(f"[{TAG}] Error in {name} phase: {e}")

    return False
