import argparse
import asyncio
import logging

from dotenv import load_dotenv

from pagewarden.inference.core.tasks.search_on_bing import search_on_bing
from pagewarden.inference.infra.browser import Browser
from pagewarden.schema.catalog import get_catalog
from pagewarden.utils.settings import settings

load_dotenv()


logger = logging.getLogger(__name__)


async def run_local(
    url: str,
    title: str | None,
    headless: bool,
    stealth: bool,
    mobile: bool,
    catalog_path: str | None,
):
    catalog = await get_catalog(catalog_path or settings.CATALOG_PATH)
    browser = Browser(
        catalog=catalog, headless=headless, stealth=stealth, is_mobile=mobile
    )
    try:
        await browser.start()
        logger.info(f"Navigating to {url}")
        page = await browser.go_to_url(url)
        logger.info(f"Navigated to {page.url}")

        if title:
            await search_on_bing(page, title, catalog)
    except Exception as e:
        logger.error(f"Error running local session: {e}")
        raise e
    finally:
        await browser.stop()


def main():
    parser = argparse.ArgumentParser(
        description="Open a page, clear its consent banners and overlays, optionally search"
    )
    parser.add_argument(
        "--url",
        type=str,
        default="https://www.bing.com",
        help="Page to open",
    )
    parser.add_argument(
        "--title",
        type=str,
        default=None,
        help="Activity title to search for once the page is clear",
    )
    parser.add_argument(
        "--catalog",
        type=str,
        default=None,
        help="JSON locator catalog to use instead of the built-in one",
    )
    parser.add_argument("--headless", action="store_true")
    parser.add_argument("--no-stealth", action="store_true")
    parser.add_argument("--mobile", action="store_true")

    args = parser.parse_args()

    asyncio.run(
        run_local(
            args.url,
            args.title,
            args.headless,
            not args.no_stealth,
            args.mobile,
            args.catalog,
        )
    )


if __name__ == "__main__":
    main()
