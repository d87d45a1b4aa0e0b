import asyncio
import logging

from playwright.async_api import Page

from pagewarden.inference.core.dismissal.navigation_guard import (
    try_dismiss_all_messages,
)
from pagewarden.inference.core.dismissal.overlay_neutralizer import neutralize
from pagewarden.inference.core.tasks.queries import get_search_query
from pagewarden.inference.infra.page_scripts import PageScript, run_page_script
from pagewarden.schema.catalog import LocatorCatalog
from pagewarden.utils.settings import settings

logger = logging.getLogger(__name__)

TAG = "SEARCH-ON-BING"


async def type_into_search_bar(
    page: Page, catalog: LocatorCatalog, query: str, attempt: int
):
    search_bar = catalog.search_input

    # Overlays can come back after the first resolution
    await neutralize(page, catalog)

    await page.wait_for_selector(search_bar, state="visible", timeout=10000)

    if attempt > 0:
        await run_page_script(
            page, PageScript.FOCUS_ELEMENT, {"selector": search_bar, "clear": True}
        )
        await asyncio.sleep(settings.SEARCH_STEP_WAIT_SECONDS)

    try:
        await page.click(search_bar, timeout=5000)
    except Exception as e:
        logger.debug(f"[{TAG}] Direct click on search bar failed, dispatching: {e}")
        await run_page_script(
            page, PageScript.FOCUS_ELEMENT, {"selector": search_bar, "clear": False}
        )

    await asyncio.sleep(settings.SEARCH_STEP_WAIT_SECONDS)
    await page.keyboard.type(query)
    await asyncio.sleep(settings.SEARCH_STEP_WAIT_SECONDS)
    await page.keyboard.press("Enter")


async def search_on_bing(page: Page, title: str, catalog: LocatorCatalog) -> bool:
    logger.info(f"[{TAG}] Trying to complete SearchOnBing")

    try:
        await asyncio.sleep(settings.SEARCH_START_WAIT_SECONDS)

        await try_dismiss_all_messages(page, catalog)
        await neutralize(page, catalog)

        query = await get_search_query(title)

        max_attempts = settings.SEARCH_MAX_ATTEMPTS
        for attempt in range(max_attempts):
            try:
                await type_into_search_bar(page, catalog, query, attempt)
                logger.info(f"[{TAG}] Successfully searched for: {query}")
                break
            except Exception as e:
                if attempt == max_attempts - 1:
                    raise e
                logger.warning(
                    f"[{TAG}] Attempt {attempt + 1}/{max_attempts} failed, retrying: {e}"
                )
                await asyncio.sleep(settings.SEARCH_RETRY_WAIT_SECONDS)

        await asyncio.sleep(settings.SEARCH_START_WAIT_SECONDS)
        await page.close()

        logger.info(f"[{TAG}] Completed the SearchOnBing successfully")
        return True
    except Exception as e:
        logger.error(f"[{TAG}] An error occurred: {e}")
        try:
            await page.close()
        except Exception as close_error:
            logger.warning(f"[{TAG}] Could not close the search tab: {close_error}")
        return False
