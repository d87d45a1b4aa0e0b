import asyncio
import logging
from urllib.parse import urlparse

from playwright.async_api import Page

from pagewarden.exceptions import TabNotFoundException
from pagewarden.inference.core.dismissal.navigation_guard import on_navigated
from pagewarden.schema.catalog import DEFAULT_CATALOG, LocatorCatalog
from pagewarden.utils.settings import settings

logger = logging.getLogger(__name__)


class Browser:
    def __init__(
        self,
        catalog: LocatorCatalog = DEFAULT_CATALOG,
        headless: bool = False,
        stealth: bool = True,
        is_mobile: bool = False,
    ):
        self.catalog = catalog
        self.headless = headless
        self.stealth = stealth
        self.is_mobile = is_mobile

        self.playwright = None
        self.browser = None
        self.context = None
        self.page = None

    async def start(self):
        logger.debug("Starting browser")
        try:
            if self.playwright is not None:
                await self.playwright.stop()

            if self.stealth:
                from patchright.async_api import async_playwright
            else:
                from playwright.async_api import async_playwright

            self.playwright = await async_playwright().start()
            self.browser = await self.playwright.chromium.launch(
                channel="chromium",
                headless=self.headless,
                chromium_sandbox=False,
            )

            if self.is_mobile:
                device = self.playwright.devices["Pixel 7"]
                self.context = await self.browser.new_context(**device)
            else:
                self.context = await self.browser.new_context(no_viewport=True)
            self.page = await self.context.new_page()

            logger.debug("Browser started successfully")

        except Exception as e:
            logger.error(f"Error starting playwright: {e}")
            raise e

    async def stop(self):
        logger.debug("Stopping browser")
        if self.context is not None:
            logger.debug("Stopping context")
            await self.context.close()
            self.context = None

        if self.browser is not None:
            await self.browser.close()
            self.browser = None

        if self.playwright is not None:
            logger.debug("Stopping playwright")
            await self.playwright.stop()
            self.playwright = None
        logger.debug("Browser stopped")

    async def get_current_page(self) -> Page | None:
        if self.context is None:
            return None
        pages = self.context.pages
        if len(pages) == 0:
            self.page = await self.context.new_page()
        else:
            self.page = pages[-1]

        return self.page

    async def go_to_url(self, url: str) -> Page | None:
        page = await self.get_current_page()
        if page is None:
            return None
        await page.goto(url)
        await on_navigated(page, self.catalog)
        return page

    async def get_latest_tab(self) -> Page:
        try:
            await asyncio.sleep(settings.TAB_WAIT_SECONDS)

            pages = self.context.pages if self.context is not None else []
            if pages:
                return pages[-1]

            logger.error("[GET-NEW-TAB] Unable to get latest tab")
            raise TabNotFoundException("Unable to get latest tab")
        except TabNotFoundException:
            raise
        except Exception as e:
            logger.error(f"[GET-NEW-TAB] An error occurred: {e}")
            raise TabNotFoundException(f"An error occurred: {e}", original_error=e)

    async def get_tabs(self) -> tuple[Page, Page]:
        """Home tab is the second page of the context, worker tab the third."""
        try:
            pages = self.context.pages if self.context is not None else []

            if len(pages) < 2:
                raise TabNotFoundException("Home tab could not be found!")
            home_tab = pages[1]

            hostname = urlparse(home_tab.url).hostname
            if hostname != settings.HOME_TAB_HOSTNAME:
                raise TabNotFoundException(
                    f"Reward page hostname is invalid: {hostname}"
                )

            if len(pages) < 3:
                raise TabNotFoundException("Worker tab could not be found!")
            worker_tab = pages[2]

            return home_tab, worker_tab
        except TabNotFoundException as e:
            logger.error(f"[GET-TABS] {e.message}")
            raise
        except Exception as e:
            logger.error(f"[GET-TABS] An error occurred: {e}")
            raise TabNotFoundException(f"An error occurred: {e}", original_error=e)
