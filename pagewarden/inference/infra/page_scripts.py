"""
Fixed set of scripts evaluated inside the page.

Everything the dismissal code runs in the page context goes through
``run_page_script`` with one of these members, so the in-page surface stays
small and can be faked in tests without a browser.
"""

import logging
from enum import Enum
from typing import Any

from playwright.async_api import Frame, Page

from pagewarden.schema.locator import Locator, LocatorKind

logger = logging.getLogger(__name__)


class PageScript(str, Enum):
    ANY_PRESENT = """
    selectors => selectors.some(sel => document.querySelector(sel) !== null)
    """

    CLICK_BY_SELECTOR = """
    selector => {
        const el = document.querySelector(selector);
        if (el instanceof HTMLElement) {
            el.click();
            return true;
        }
        return false;
    }
    """

    CLICK_BY_XPATH = """
    expression => {
        const result = document.evaluate(
            expression, document, null, XPathResult.FIRST_ORDERED_NODE_TYPE, null
        );
        const el = result.singleNodeValue;
        if (el instanceof HTMLElement) {
            el.click();
            return true;
        }
        return false;
    }
    """

    CLICK_BY_TEXT = """
    ({ tag, text }) => {
        if (!document.body) {
            return false;
        }
        const skipped = ['SCRIPT', 'STYLE', 'NOSCRIPT', 'TEMPLATE'];
        const matches = Array.from(document.body.querySelectorAll(tag || '*')).filter(
            c => c instanceof HTMLElement
                && !skipped.includes(c.tagName)
                && (c.innerText || '').includes(text)
        );
        // Ancestors of the control match too, keep the innermost one
        const el = matches.find(c => !matches.some(other => other !== c && c.contains(other)));
        if (el instanceof HTMLElement) {
            el.click();
            return true;
        }
        return false;
    }
    """

    HIDE_ELEMENTS = """
    selectors => {
        let hidden = 0;
        document.querySelectorAll(selectors.join(',')).forEach(el => {
            if (el instanceof HTMLElement) {
                el.style.display = 'none';
                hidden += 1;
            }
        });
        return hidden;
    }
    """

    DETACH_ELEMENTS = """
    selectors => {
        let removed = false;
        for (const sel of selectors) {
            document.querySelectorAll(sel).forEach(el => {
                if (el instanceof HTMLElement) {
                    el.style.display = 'none';
                    el.style.visibility = 'hidden';
                    el.style.opacity = '0';
                    el.style.pointerEvents = 'none';
                    el.setAttribute('aria-hidden', 'true');
                    if (el.parentElement) {
                        el.parentElement.removeChild(el);
                    }
                    removed = true;
                }
            });
        }
        return removed;
    }
    """

    SET_STORAGE = """
    entries => {
        for (const [key, value] of Object.entries(entries)) {
            localStorage.setItem(key, value);
        }
        return true;
    }
    """

    SET_COOKIES = """
    cookies => {
        for (const cookie of cookies) {
            document.cookie = cookie;
        }
        return true;
    }
    """

    FOCUS_ELEMENT = """
    ({ selector, clear }) => {
        const el = document.querySelector(selector);
        if (!(el instanceof HTMLElement)) {
            return false;
        }
        el.focus();
        if (clear && 'value' in el) {
            el.value = '';
        }
        el.dispatchEvent(new MouseEvent('click', { bubbles: true, cancelable: true, view: window }));
        return true;
    }
    """


async def run_page_script(
    target: Page | Frame, script: PageScript, arg: Any = None
) -> Any:
    logger.debug(f"Running page script {script.name}")
    return await target.evaluate(script.value, arg)


async def click_via_script(target: Page | Frame, locator: Locator) -> bool:
    """Native DOM click on the element a locator describes, bypassing actionability."""
    if locator.kind == LocatorKind.XPATH:
        return await run_page_script(
            target, PageScript.CLICK_BY_XPATH, locator.pattern
        )
    if locator.kind == LocatorKind.TEXT:
        return await run_page_script(
            target,
            PageScript.CLICK_BY_TEXT,
            {"tag": locator.tag, "text": locator.pattern},
        )
    return await run_page_script(target, PageScript.CLICK_BY_SELECTOR, locator.pattern)


def cookie_strings(names: list[str], domain: str) -> list[str]:
    return [
        f"{name}=1; domain={domain}; path=/; max-age=31536000; SameSite=None; Secure"
        for name in names
    ]
