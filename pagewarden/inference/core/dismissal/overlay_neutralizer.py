import asyncio
import logging

from playwright.async_api import Page

from pagewarden.inference.infra.page_scripts import (
    PageScript,
    cookie_strings,
    run_page_script,
)
from pagewarden.schema.catalog import LocatorCatalog
from pagewarden.utils.settings import settings

logger = logging.getLogger(__name__)

TAG = "SEARCH-OVERLAY"


async def overlay_present(page: Page, catalog: LocatorCatalog) -> bool:
    selectors = [locator.pattern for locator in catalog.overlay_removal]
    return bool(await run_page_script(page, PageScript.ANY_PRESENT, selectors))


async def click_overlay_reject(page: Page, catalog: LocatorCatalog) -> bool:
    for locator in catalog.overlay_reject:
        try:
            candidate = page.locator(locator.selector)
            if await candidate.count() == 0:
                continue
            await candidate.first.click(
                force=True, timeout=settings.CLICK_TIMEOUT_SECONDS * 1000
            )
            logger.info(
                f"[{TAG}] Clicked reject button using selector: {locator.label}"
            )
            await asyncio.sleep(settings.BANNER_WAIT_SECONDS)
            return True
        except Exception as e:
            logger.warning(f"[{TAG}] Direct click on {locator.label} failed: {e}")
    return False


async def remove_overlay_elements(page: Page, catalog: LocatorCatalog) -> bool:
    selectors = [locator.pattern for locator in catalog.overlay_removal]
    removed = await run_page_script(page, PageScript.DETACH_ELEMENTS, selectors)

    suppression = catalog.overlay_suppression
    await run_page_script(
        page,
        PageScript.SET_COOKIES,
        cookie_strings(suppression.cookie_names, suppression.cookie_domain),
    )
    await run_page_script(page, PageScript.SET_STORAGE, suppression.storage)
    return bool(removed)


async def neutralize(page: Page, catalog: LocatorCatalog) -> bool:
    try:
        if not await overlay_present(page, catalog):
            return False

        logger.info(f"[{TAG}] Detected search page overlay, attempting to remove it")

        if await click_overlay_reject(page, catalog):
            return True

        if await remove_overlay_elements(page, catalog):
            logger.info(f"[{TAG}] Successfully removed search overlay via JavaScript")
            return True

        # The overlay may still be there, this only gets the next interaction through
        await run_page_script(
            page,
            PageScript.FOCUS_ELEMENT,
            {"selector": catalog.search_input, "clear": False},
        )
        logger.info(f"[{TAG}] Attempted JavaScript focus/click as fallback")
        return False
    except Exception as e:
        logger.error(f"[{TAG}] Error handling search overlay: {e}")
        return False
