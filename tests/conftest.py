"""
Pytest Konfiguration und gemeinsame Fixtures.
"""

import sys
from pathlib import Path
from typing import Dict, List, Optional

import pytest

# Projekt-Root zum Path hinzufügen
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from vetscraper.config.settings import Settings, RateLimitConfig, ExportConfig  # noqa: E402
from vetscraper.client.browser import BrowserResponse  # noqa: E402


def make_entry(
    name: str = "Cabinet Vétérinaire du Lac",
    address_parts: Optional[List[str]] = None,
    phone_href: Optional[str] = "tel:+41211234567",
    email_href: Optional[str] = "mailto:info@vet-lac.ch",
    website: Optional[str] = "https://www.vet-lac.ch",
    category: Optional[str] = "Vétérinaire"
) -> str:
    """Baut eine Ergebniskarte wie auf tel.search.ch."""
    if address_parts is None:
        address_parts = ["Rue du Lac 12", "1003 Lausanne"]

    parts = ['<article class="entry">']
    parts.append(f'<a href="https://tel.search.ch/lausanne/rue-du-lac-12"><h2>{name}</h2></a>')
    if address_parts:
        divs = "".join(f"<div>{p}</div>" for p in address_parts)
        parts.append(f"<address>{divs}</address>")
    if phone_href:
        parts.append(f'<a href="{phone_href}">021 123 45 67</a>')
    if email_href:
        parts.append(f'<a href="{email_href}">E-Mail</a>')
    if website:
        parts.append(f'<a class="website" href="{website}">Site web</a>')
    if category:
        parts.append(f'<div class="category">{category}</div>')
    parts.append("</article>")
    return "".join(parts)


def make_page(entries: List[str], has_next: bool = False, total: Optional[int] = None) -> str:
    """Baut eine Ergebnisseite."""
    header = f'<div class="tel-result-count">{total} résultats</div>' if total is not None else ""
    pagination = '<a class="next" href="?page=2">Suivant</a>' if has_next else ""
    return (
        "<html><body>"
        f"{header}"
        f"<div class='results'>{''.join(entries)}</div>"
        f"<nav>{pagination}</nav>"
        "</body></html>"
    )


EMPTY_PAGE = "<html><body><p>Aucun résultat</p></body></html>"


class FakeBrowser:
    """Ersetzt den Playwright-Browser durch feste HTML-Seiten pro URL."""

    def __init__(
        self,
        pages: Optional[Dict[str, str]] = None,
        fail_urls: Optional[List[str]] = None,
        consent: bool = True
    ):
        self.pages = pages or {}
        self.fail_urls = fail_urls or []
        self.consent = consent
        self.visited: List[str] = []
        self.started = False
        self.closed = False
        self._current = ""

    def start(self) -> None:
        self.started = True

    def navigate(self, url: str, wait_until: Optional[str] = None) -> BrowserResponse:
        self.visited.append(url)
        if url in self.fail_urls:
            return BrowserResponse(
                success=False, content="", url=url, final_url=url, error="net::ERR_FAILED"
            )
        self._current = self.pages.get(url, EMPTY_PAGE)
        return BrowserResponse(success=True, content=self._current, url=url, final_url=url)

    def wait_for_selector(self, selector: str, timeout: Optional[int] = None, state: str = "attached") -> bool:
        return "entry" in self._current or "card-info" in self._current

    def get_content(self) -> str:
        return self._current

    def dismiss_consent_banner(self) -> bool:
        return self.consent

    def close(self) -> None:
        self.closed = True

    def get_stats(self) -> dict:
        return {"request_count": len(self.visited)}


@pytest.fixture
def fast_settings(tmp_path) -> Settings:
    """Settings ohne Wartezeiten, Ausgabe im tmp-Verzeichnis."""
    return Settings(
        rate_limit=RateLimitConfig(page_delay=0.0),
        export=ExportConfig(output_dir=tmp_path)
    )
