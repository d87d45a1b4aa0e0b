import asyncio
import logging

from bs4 import BeautifulSoup
from playwright.async_api import Page

from pagewarden.exceptions import BadPageReloadException
from pagewarden.inference.core.dismissal.consent_resolver import resolve
from pagewarden.inference.core.dismissal.strategy_executor import run_batch
from pagewarden.schema.catalog import LocatorCatalog
from pagewarden.utils.settings import settings

logger = logging.getLogger(__name__)


def is_network_error_page(html: str) -> bool:
    soup = BeautifulSoup(html, "html.parser")
    return soup.select_one("body.neterror") is not None


async def reload_bad_page(page: Page, catalog: LocatorCatalog) -> bool:
    """Reload the page if the browser rendered its network error page."""
    try:
        try:
            html = await page.content()
        except Exception as e:
            logger.debug(f"[RELOAD-BAD-PAGE] Could not read page content: {e}")
            html = ""

        if not is_network_error_page(html):
            return False

        logger.info("[RELOAD-BAD-PAGE] Bad page detected, reloading!")
        await page.reload()
        await asyncio.sleep(settings.RELOAD_WAIT_SECONDS)
        await resolve(page, catalog)
        return True
    except Exception as e:
        logger.error(f"[RELOAD-BAD-PAGE] An error occurred: {e}")
        raise BadPageReloadException(
            message=f"Failed to reload bad page: {e}",
            url=page.url,
            original_error=e,
        )


async def try_dismiss_all_messages(
    page: Page, catalog: LocatorCatalog, reject_cookies_first: bool = True
) -> bool:
    if reject_cookies_first and await resolve(page, catalog):
        return True

    return await run_batch(
        page, catalog.dismiss_generic, settings.DISMISS_TIMEOUT_SECONDS
    )


async def resolve_until_quiescent(page: Page, catalog: LocatorCatalog) -> int:
    """Call resolve until it reports nothing left; returns the number of calls."""
    max_iterations = settings.MAX_RESOLVE_ITERATIONS
    for iteration in range(max_iterations):
        # Direct injection is a forced override, only the first pass may use it
        if not await resolve(page, catalog, allow_direct_injection=iteration == 0):
            return iteration + 1

    logger.warning(
        f"[PAGE-NAV] Cookie banners still resolving after {max_iterations} passes, giving up"
    )
    return max_iterations


async def on_navigated(page: Page, catalog: LocatorCatalog) -> None:
    try:
        try:
            await page.wait_for_load_state("domcontentloaded")
        except Exception as e:
            logger.debug(f"[PAGE-NAV] Load state wait failed: {e}")

        await reload_bad_page(page, catalog)

        passes = await resolve_until_quiescent(page, catalog)
        logger.debug(f"[PAGE-NAV] Consent resolution settled after {passes} passes")

        await try_dismiss_all_messages(page, catalog, reject_cookies_first=False)
    except Exception as e:
        logger.error(f"[PAGE-NAV] Error handling page navigation: {e}")
