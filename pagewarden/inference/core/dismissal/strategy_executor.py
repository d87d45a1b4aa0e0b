import asyncio
import logging

from playwright.async_api import Frame, Locator as PlaywrightLocator, Page

from pagewarden.schema.locator import DismissalOutcome, Locator

logger = logging.getLogger(__name__)

Scope = Page | Frame | PlaywrightLocator


async def is_present_and_visible(scope: Scope, locator: Locator, timeout: float) -> bool:
    """True if the locator matches at least one visible element within timeout."""

    async def _check():
        candidate = scope.locator(locator.selector)
        if await candidate.count() == 0:
            return False
        return await candidate.first.is_visible()

    try:
        return await asyncio.wait_for(_check(), timeout=timeout)
    except Exception as e:
        logger.debug(f"Visibility check for {locator.label} did not match: {e!r}")
        return False


async def attempt_locator(
    scope: Scope, locator: Locator, per_action_timeout: float, tag: str
) -> DismissalOutcome:
    outcome = DismissalOutcome(attempted=locator)

    async def _attempt():
        element = scope.locator(locator.selector).first
        if not await element.is_visible():
            return
        outcome.matched = True
        await element.click(timeout=per_action_timeout * 1000)
        outcome.acted = True
        logger.info(f"[{tag}] Dismissed: {locator.label}")

    try:
        # visibility check and click share one budget
        await asyncio.wait_for(_attempt(), timeout=per_action_timeout)
    except asyncio.TimeoutError:
        outcome.error = f"timed out after {per_action_timeout}s"
    except Exception as e:
        outcome.error = str(e)

    return outcome


async def run_batch(
    scope: Scope,
    locators: list[Locator],
    per_action_timeout: float,
    tag: str = "DISMISS-ALL-MESSAGES",
) -> bool:
    if not locators:
        return False

    results = await asyncio.gather(
        *[
            attempt_locator(scope, locator, per_action_timeout, tag)
            for locator in locators
        ],
        return_exceptions=True,
    )

    outcomes: list[DismissalOutcome] = []
    for locator, result in zip(locators, results):
        if isinstance(result, BaseException):
            outcomes.append(DismissalOutcome(attempted=locator, error=str(result)))
        else:
            outcomes.append(result)

    for outcome in outcomes:
        if outcome.matched and not outcome.acted:
            logger.warning(
                f"[{tag}] {outcome.attempted.label} was visible but not clicked: {outcome.error}"
            )

    return any(outcome.acted for outcome in outcomes)


async def click_first_visible(
    scope: Scope,
    locators: list[Locator],
    timeout: float,
    force: bool = False,
) -> DismissalOutcome | None:
    """Click the first locator, in priority order, that has a visible match.

    A failed click on a visible match still counts as acted: the element was
    found and hit, and the caller's next pass decides whether it went away.
    """
    for locator in locators:
        if not await is_present_and_visible(scope, locator, timeout):
            continue

        outcome = DismissalOutcome(attempted=locator, matched=True, acted=True)
        try:
            await scope.locator(locator.selector).first.click(
                timeout=timeout * 1000, force=force
            )
        except Exception as e:
            outcome.error = str(e)
            logger.warning(f"Click on {locator.label} failed: {e}")
        return outcome

    return None
