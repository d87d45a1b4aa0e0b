import logging
from pathlib import Path

import aiofiles
from pydantic import BaseModel, Field, field_validator

from pagewarden.schema.locator import Locator, LocatorKind, css, text, xpath

logger = logging.getLogger(__name__)


class TextBanner(BaseModel):
    """A banner recognised by its wording rather than by a stable selector."""

    label: str
    detect: Locator
    reject: Locator


class DirectInjection(BaseModel):
    storage: dict[str, str] = Field(default_factory=dict)
    cookies: list[str] = Field(default_factory=list)
    hide_selectors: list[str] = Field(default_factory=list)


class OverlaySuppression(BaseModel):
    cookie_names: list[str] = Field(default_factory=list)
    cookie_domain: str = ".bing.com"
    storage: dict[str, str] = Field(default_factory=dict)


class LocatorCatalog(BaseModel):
    dismiss_generic: list[Locator] = Field(default_factory=list)
    reject_cookies: list[Locator] = Field(default_factory=list)
    reject_cookies_locale: dict[str, list[Locator]] = Field(default_factory=dict)
    overlay_removal: list[Locator] = Field(default_factory=list)

    text_banners: list[TextBanner] = Field(default_factory=list)
    banner_containers: list[Locator] = Field(default_factory=list)
    consent_frame_keywords: list[str] = Field(default_factory=list)
    overlay_reject: list[Locator] = Field(default_factory=list)
    direct_injection: DirectInjection = Field(default_factory=DirectInjection)
    overlay_suppression: OverlaySuppression = Field(
        default_factory=OverlaySuppression
    )
    search_input: str = "#sb_form_q"

    @field_validator("overlay_removal")
    def validate_overlay_removal(cls, v):
        # Removal runs through document.querySelectorAll in the page
        for locator in v:
            if locator.kind != LocatorKind.CSS:
                raise ValueError(
                    f"overlay_removal only accepts css locators, got {locator.kind.value} for {locator.label}"
                )
        return v

    def locale_reject(self) -> list[Locator]:
        """All locale-specific reject locators, languages in insertion order."""
        return [
            locator
            for locators in self.reject_cookies_locale.values()
            for locator in locators
        ]


DEFAULT_CATALOG = LocatorCatalog(
    dismiss_generic=[
        css("#acceptButton", "AcceptButton"),
        css(".ext-secondary.ext-button", '"Skip for now" Button'),
        css("#iLandingViewAction", "iLandingViewAction"),
        css("#iShowSkip", "iShowSkip"),
        css("#iNext", "iNext"),
        css("#iLooksGood", "iLooksGood"),
        css("#idSIButton9", "idSIButton9"),
        css(".ms-Button.ms-Button--primary", "Primary Button"),
        css(".c-glyph.glyph-cancel", "Mobile Welcome Button"),
        css(".maybe-later", "Mobile Rewards App Banner"),
        xpath(
            '//div[@id="cookieConsentContainer"]//button[contains(text(), "Accept")]',
            "Accept Cookie Consent Container",
        ),
        css("#bnp_btn_accept", "Bing Cookie Banner"),
        css("#reward_pivot_earn", "Reward Coupon Accept"),
    ],
    reject_cookies=[
        css("#bnp_btn_reject", "Bing Cookie Reject Button"),
        css("#cookie-banner-reject", "MS Cookie Banner Reject"),
        css('[data-bi-id="reject"]', "MS Data-bi-id Reject"),
        css('button[id*="reject"]', "Button ID Contains Reject"),
        css('button[id*="decline"]', "Button ID Contains Decline"),
        css(".reject-cookies", "Reject Cookies Class"),
        css(".optanon-allow-all-reject", "Optanon Reject"),
        css(".js-reject-cookies", "JS Reject Cookies"),
        xpath('//button[contains(text(), "Refuser")]', "French Reject Button"),
        xpath('//button[contains(text(), "Ablehnen")]', "German Reject Button"),
        xpath('//button[contains(text(), "Rechazar")]', "Spanish Reject Button"),
        xpath('//button[contains(text(), "Rifiuta")]', "Italian Reject Button"),
        xpath('//button[contains(text(), "Reject")]', "Generic Reject Button"),
        xpath('//button[contains(text(), "Decline")]', "Generic Decline Button"),
        xpath('//button[contains(text(), "No")]', "Generic No Button"),
        xpath('//button[contains(text(), "Refuse")]', "Generic Refuse Button"),
        xpath('//button[contains(text(), "Reject All")]', "Reject All Button"),
        xpath('//button[contains(text(), "Decline All")]', "Decline All Button"),
        css("#reject-all", "Reject All ID"),
        css(".reject-all", "Reject All Class"),
        css('[data-action="reject"]', "Data Action Reject"),
        xpath('//a[contains(text(), "Reject all")]', "Reject All Link"),
        css("#onetrust-reject-all-handler", "OneTrust Reject All"),
        css(".coppa-decline", "COPPA Decline"),
        css("#declineButton", "Decline Button ID"),
        xpath('//button[contains(@aria-label, "Reject")]', "MS Aria Reject Button"),
    ],
    reject_cookies_locale={
        "fr": [
            xpath('//button[contains(text(), "Refuser")]', "French Refuse Button"),
            css("#bnp_btn_refuse", "Bing French Refuse Button"),
            css("#bnp_btn_reject", "Bing Reject Button"),
            css("#bnp_btn_decline", "Bing Decline Button"),
            css("#bnp_hfly_cta2", "Bing Cookie Banner Button 2"),
            xpath(
                '//button[@id="bnp_btn_reject" or @id="bnp_btn_refuse"'
                ' or contains(@id, "reject") or contains(@id, "refuse")]',
                "Combined Bing Reject Button",
            ),
            xpath('//button[text()="Refuser"]', "Exact French Refuse Button"),
        ],
    },
    overlay_removal=[
        css(".bnp_overlay_wrapper", "Bing Overlay Wrapper"),
        css('[id^="bnp.nid"]', "Bing Notification Overlay"),
        css(
            '[data-viewname="OverlayBanner_NoTitleRejectBtn"]',
            "Overlay Banner Reject View",
        ),
        css("#cookie-banner", "Cookie Banner ID"),
        css(".cookie_prompt", "Cookie Prompt"),
        css('[aria-label*="cookie"]', "Aria Cookie Element"),
    ],
    text_banners=[
        TextBanner(
            label="French Microsoft cookie banner",
            detect=xpath(
                '//p[contains(text(), "Microsoft et ses fournisseurs")'
                ' or contains(text(), "personnaliser les annonces")]',
                "French Microsoft Banner Text",
            ),
            reject=text("Refuser", "French Refuse Text Button", tag="button"),
        ),
    ],
    banner_containers=[
        css("div#cookie-banner", "div#cookie-banner"),
        css("div.cookie-banner", "div.cookie-banner"),
        css("div.cookie-consent", "div.cookie-consent"),
        css("div.consent-banner", "div.consent-banner"),
        css('div[aria-label*="cookie"]', 'div[aria-label*="cookie"]'),
        css('div[id*="cookie"]', 'div[id*="cookie"]'),
        css('div[class*="cookie"]', 'div[class*="cookie"]'),
        css('div[id*="consent"]', 'div[id*="consent"]'),
        css('div[class*="consent"]', 'div[class*="consent"]'),
        css('div[id*="gdpr"]', 'div[id*="gdpr"]'),
        css('div[class*="gdpr"]', 'div[class*="gdpr"]'),
        css("div.optanon-alert-box-wrapper", "div.optanon-alert-box-wrapper"),
        css('[aria-describedby*="cookie"]', '[aria-describedby*="cookie"]'),
        css("dialog:visible", "dialog:visible"),
        css('div[role="dialog"]:visible', 'div[role="dialog"]:visible'),
    ],
    consent_frame_keywords=["cookie", "consent", "privacy"],
    overlay_reject=[
        css(".bnp_btn_reject", ".bnp_btn_reject"),
        css("#bnp_btn_reject", "#bnp_btn_reject"),
        css(".bnp_hfly_cta2", ".bnp_hfly_cta2"),
        css("#bnp_hfly_cta2", "#bnp_hfly_cta2"),
        css('[aria-label*="Reject"]', '[aria-label*="Reject"]'),
        css('[aria-label*="Refuse"]', '[aria-label*="Refuse"]'),
        css('[aria-label*="Decline"]', '[aria-label*="Decline"]'),
        text("Refuser", 'button:has-text("Refuser")', tag="button"),
        text("Reject", 'button:has-text("Reject")', tag="button"),
        text("Decline", 'button:has-text("Decline")', tag="button"),
    ],
    direct_injection=DirectInjection(
        storage={
            "_EDGE_V": "1",
            "MSCC": "cid=necessary",
            "MC1": "GUID=1&HASH=1&LV=202104&V=4&LU=1618585904995",
            "MUID": "preference:rejected",
        },
        cookies=[
            "MS-CV=rejected; domain=.bing.com; path=/; secure; samesite=none",
            "MUID=preference:rejected; domain=.bing.com; path=/; secure; samesite=none",
            "_EDGE_V=1; domain=.bing.com; path=/; secure; samesite=none",
        ],
        hide_selectors=["#bnp_container", "#cookie-banner", ".cookie-banner"],
    ),
    overlay_suppression=OverlaySuppression(
        cookie_names=["SRCHHPGUSR", "SRCHUID", "BCP", "_EDGE_V", "MUID", "MC1", "MSCC"],
        cookie_domain=".bing.com",
        storage={
            "SRCHHPGUSR": "SRCHLANG=en&BRW=XW&BRH=S&CW=1420&CH=333&SCW=1420&SCH=333"
            "&DPR=1.0&UTC=60&DM=0&WTS=63848700397&HV=1719081120&PRVCW=1420"
            "&PRVCH=333&THEME=1",
            "_EDGE_V": "1",
            "MSCC": "cid=necessary",
        },
    ),
    search_input="#sb_form_q",
)


async def load_catalog(path: Path | str) -> LocatorCatalog:
    if isinstance(path, str):
        path = Path(path)
    async with aiofiles.open(path, "r", encoding="utf-8") as f:
        content = await f.read()
    catalog = LocatorCatalog.model_validate_json(content)
    logger.debug(
        f"Loaded catalog from {path}: {len(catalog.reject_cookies)} reject locators, "
        f"{len(catalog.dismiss_generic)} dismiss locators"
    )
    return catalog


async def get_catalog(path: Path | str | None = None) -> LocatorCatalog:
    if path is None:
        return DEFAULT_CATALOG
    try:
        return await load_catalog(path)
    except Exception as e:
        logger.error(f"Failed to load catalog from {path}, using default: {e}")
        return DEFAULT_CATALOG
