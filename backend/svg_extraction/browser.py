"""
Playwright-backed page session.

Loads the page in headless Chromium and captures the snapshot the rest of
the package works on. The browser belongs to a single request and is closed
on every exit path.
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, async_playwright

from .dom import Document
from .errors import NavigationError

logger = logging.getLogger(__name__)

# Captures outermost <svg> subtrees in full, plus shallow records for the
# elements that can reference an SVG file. Runs as one synchronous unit in
# the page and never modifies the document.
SNAPSHOT_SCRIPT = """
() => {
  const PAINT_PROPERTIES = ["color", "fill", "stroke"];
  const REFERENCE_TAGS = ["img", "object", "embed"];

  function attributesOf(el) {
    const out = {};
    for (const attr of Array.from(el.attributes)) {
      out[attr.name] = attr.value;
    }
    return out;
  }

  function boxOf(el) {
    const rect = el.getBoundingClientRect();
    return { x: rect.x, y: rect.y, width: rect.width, height: rect.height };
  }

  function captureTree(el) {
    const computed = window.getComputedStyle(el);
    const style = {};
    PAINT_PROPERTIES.forEach((prop) => {
      style[prop] = computed.getPropertyValue(prop);
    });
    const node = {
      tag: el.localName,
      attributes: attributesOf(el),
      text: "",
      tail: "",
      style,
      box: boxOf(el),
      children: [],
    };
    if (el.localName === "svg" && typeof el.getBBox === "function") {
      try {
        const bbox = el.getBBox();
        node.contentBox = { x: bbox.x, y: bbox.y, width: bbox.width, height: bbox.height };
      } catch (e) {
        // Not rendered; no intrinsic bounds
      }
    }
    for (const child of Array.from(el.childNodes)) {
      if (child.nodeType === Node.ELEMENT_NODE) {
        node.children.push(captureTree(child));
      } else if (child.nodeType === Node.TEXT_NODE || child.nodeType === Node.CDATA_SECTION_NODE) {
        if (node.children.length) {
          node.children[node.children.length - 1].tail += child.data;
        } else {
          node.text += child.data;
        }
      }
    }
    return node;
  }

  function captureShallow(el, backgroundImage) {
    const node = {
      tag: el.localName,
      attributes: attributesOf(el),
      style: { "background-image": backgroundImage },
      box: boxOf(el),
      children: [],
    };
    if (el.localName === "img") {
      node.natural = { width: el.naturalWidth, height: el.naturalHeight };
    }
    return node;
  }

  const nodes = [];
  for (const el of Array.from(document.querySelectorAll("*"))) {
    const insideGraphic = el.parentElement !== null && el.parentElement.closest("svg") !== null;
    if (el.localName === "svg") {
      if (!insideGraphic) {
        nodes.push(captureTree(el));
      }
      continue;
    }
    if (insideGraphic) {
      continue;
    }
    const backgroundImage = window.getComputedStyle(el).backgroundImage || "";
    if (REFERENCE_TAGS.includes(el.localName) || backgroundImage.includes("url(")) {
      nodes.push(captureShallow(el, backgroundImage));
    }
  }
  return { baseUrl: document.baseURI, nodes };
}
"""

FETCH_SCRIPT = """
async (url) => {
  try {
    const response = await fetch(url);
    if (!response.ok) {
      return null;
    }
    return await response.text();
  } catch (e) {
    return null;
  }
}
"""


class PlaywrightPageSession:
    """Page capabilities backed by a live Playwright page."""

    def __init__(self, page: Page):
        self.page = page

    async def snapshot(self) -> Document:
        data = await self.page.evaluate(SNAPSHOT_SCRIPT)
        document = Document.from_dict(data)
        logger.debug(f"Captured {len(document.elements)} top-level elements from {document.base_url}")
        return document

    async def fetch_text(self, url: str) -> Optional[str]:
        """Fetch a URL from inside the page so cookies and referrer match the page."""
        return await self.page.evaluate(FETCH_SCRIPT, url)


@asynccontextmanager
async def open_page(url: str, config) -> AsyncIterator[PlaywrightPageSession]:
    """
    Launch Chromium, load ``url`` and yield a session for it.

    Waits for the network to go idle, then for ``config.settle_delay_ms``
    more so lazily inserted graphics make it into the snapshot.

    Raises:
        NavigationError: If the page fails to load within the timeout
    """
    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(headless=True)
        try:
            context = await browser.new_context(user_agent=config.user_agent)
            page = await context.new_page()
            logger.info(f"Navigating to {url}")
            try:
                await page.goto(url, wait_until="networkidle", timeout=config.navigation_timeout_ms)
            except PlaywrightError as e:
                raise NavigationError(f"Failed to load {url}: {e}") from e
            await page.wait_for_timeout(config.settle_delay_ms)
            yield PlaywrightPageSession(page)
        finally:
            await browser.close()


async def chromium_available() -> bool:
    """Whether Playwright's Chromium build is installed."""
    async with async_playwright() as playwright:
        return os.path.exists(playwright.chromium.executable_path)
