"""
Parser für tel.search.ch Suchergebnis-Seiten.

Extrahiert Tierarzt-Einträge aus den Ergebniskarten. Die Selektoren
stehen in Tabellen, damit Markup-Änderungen ohne Code-Umbau nachgezogen
werden können.
"""

import re
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Tag
from pydantic import ValidationError

from vetscraper.models.listing import Listing, strip_scheme, TEL_SCHEME, MAILTO_SCHEME


logger = logging.getLogger(__name__)


# Ergebniskarten, in Reihenfolge versucht
RESULT_SELECTORS = [
    ".entry",
    ".card-info",
]

# "Nächste Seite"-Steuerelement
NEXT_PAGE_SELECTORS = [
    "a.next",
    "a[aria-label='Page suivante']",
]

# Anzeige der Gesamtanzahl (für Plausibilitätsprüfung)
TOTAL_COUNT_SELECTORS = [
    ".tel-result-count",
    ".result-count",
    "h1",
]

TOTAL_COUNT_PATTERN = re.compile(
    r"(\d[\d'’.]*)\s*(?:résultats?|entrées?|Treffer|Einträge)",
    re.IGNORECASE
)


@dataclass(frozen=True)
class FieldRule:
    """
    Extraktionsregel für ein Feld.

    selectors: CSS-Selektoren in Fallback-Reihenfolge.
    attribute: Attribut, das dem Text vorgezogen wird (z.B. href).
    scheme: Link-Schema, das vom Attributwert entfernt wird.
    join_all: Alle Treffer des ersten erfolgreichen Selektors verbinden
        statt nur den ersten zu nehmen.
    attribute_only: Nur das Attribut verwenden, nie den Text.
    """
    selectors: tuple
    attribute: Optional[str] = None
    scheme: Optional[str] = None
    join_all: bool = False
    attribute_only: bool = False


FIELD_RULES: Dict[str, FieldRule] = {
    "name": FieldRule(selectors=("h2", ".title", ".name")),
    "adresse": FieldRule(selectors=("address div, .address",), join_all=True),
    "telefon": FieldRule(
        selectors=("a[href^='tel:']", ".phone"),
        attribute="href",
        scheme=TEL_SCHEME
    ),
    "email": FieldRule(
        selectors=("a[href^='mailto:']", ".email"),
        attribute="href",
        scheme=MAILTO_SCHEME
    ),
    "website": FieldRule(
        selectors=("a.website", "a[href^='http']"),
        attribute="href",
        attribute_only=True
    ),
    "fachgebiet": FieldRule(selectors=(".category", ".categories")),
}


class ListingParser:
    """
    Parser für tel.search.ch Suchergebnis-Seiten.

    Extrahiert aus jeder Ergebniskarte:
    - Name
    - Adresse (aus mehreren Fragmenten zusammengesetzt)
    - Telefon, E-Mail (Link-Attribut bevorzugt, Schema entfernt)
    - Website
    - Fachgebiet
    """

    def __init__(
        self,
        field_rules: Optional[Dict[str, FieldRule]] = None,
        result_selectors: Optional[List[str]] = None,
        directory_host: str = "search.ch"
    ):
        """
        Initialisiert den Parser.

        Args:
            field_rules: Abweichende Selektor-Tabelle (Default: FIELD_RULES).
            result_selectors: Abweichende Ergebniskarten-Selektoren.
            directory_host: Host des Verzeichnisses; Links dorthin zählen nicht als Website.
        """
        self._field_rules = field_rules or FIELD_RULES
        self._result_selectors = result_selectors or RESULT_SELECTORS
        self._directory_host = directory_host
        self._parsed_count = 0
        self._skipped_count = 0

    def parse(self, html: str, kanton: str, source_url: str = "") -> List[Listing]:
        """
        Parst eine Suchergebnis-Seite.

        Args:
            html: Der HTML-Content der Seite.
            kanton: Kanton, mit dem jeder Eintrag markiert wird.
            source_url: Die URL der Seite (für Logging).

        Returns:
            Liste von Listing Objekten (leer wenn keine Karten gefunden).
        """
        listings: List[Listing] = []
        soup = BeautifulSoup(html or "", "lxml")

        cards: List[Tag] = []
        for selector in self._result_selectors:
            cards = soup.select(selector)
            if cards:
                logger.debug(f"Gefunden mit Selector '{selector}': {len(cards)} Einträge")
                break

        for card in cards:
            listing = self._parse_card(card, kanton)
            if listing is None:
                self._skipped_count += 1
                continue
            listings.append(listing)
            self._parsed_count += 1

        logger.info(f"Geparst: {len(listings)} Einträge von {source_url or 'Seite'}")
        return listings

    def _parse_card(self, card: Tag, kanton: str) -> Optional[Listing]:
        """Parst eine einzelne Ergebniskarte. None wenn kein Name."""
        values = {
            field_name: self.extract_field(card, rule)
            for field_name, rule in self._field_rules.items()
        }

        if not values.get("name"):
            return None

        try:
            return Listing(kanton=kanton, **values)
        except ValidationError as e:
            logger.warning(f"Ungültiger Eintrag verworfen: {e}")
            return None

    def extract_field(self, card: Tag, rule: FieldRule) -> str:
        """
        Wendet eine Extraktionsregel auf eine Karte an.

        Selektoren werden der Reihe nach versucht, bis einer einen
        nicht-leeren Wert liefert. Ohne Treffer: leerer String.
        """
        for selector in rule.selectors:
            if rule.join_all:
                parts = [self._clean_text(e.get_text(" ")) for e in card.select(selector)]
                value = " ".join(p for p in parts if p)
            else:
                value = ""
                for elem in card.select(selector):
                    value = self._element_value(elem, rule)
                    if value:
                        break

            if value:
                return value

        return ""

    def _element_value(self, elem: Tag, rule: FieldRule) -> str:
        """Wert eines Elements: Attribut bevorzugt, sonst Text."""
        if rule.attribute:
            attr = (elem.get(rule.attribute) or "").strip()
            if attr and rule.attribute == "href" and self._is_directory_link(attr):
                attr = ""
            if attr:
                return strip_scheme(attr, rule.scheme) if rule.scheme else attr
            if rule.attribute_only:
                return ""

        text = self._clean_text(elem.get_text(" "))
        return strip_scheme(text, rule.scheme) if rule.scheme else text

    def _is_directory_link(self, href: str) -> bool:
        """Link zeigt auf das Verzeichnis selbst (Detailseite, Karte, ...)."""
        if not href.startswith("http"):
            return False
        host = urlparse(href).netloc.lower()
        return host == self._directory_host or host.endswith("." + self._directory_host)

    def _clean_text(self, text: str) -> str:
        """Bereinigt Text von überflüssigen Whitespace etc."""
        if not text:
            return ""
        return re.sub(r"\s+", " ", text).strip()

    def has_next_page(self, html: str) -> bool:
        """
        Prüft ob ein "Nächste Seite"-Link vorhanden ist.

        Einziges Signal für weitere Seiten.
        """
        soup = BeautifulSoup(html or "", "lxml")
        for selector in NEXT_PAGE_SELECTORS:
            if soup.select_one(selector) is not None:
                return True
        return False

    def extract_total_results(self, html: str) -> Optional[int]:
        """
        Extrahiert die angezeigte Gesamtanzahl der Ergebnisse.

        Args:
            html: Der HTML-Content.

        Returns:
            Anzahl oder None wenn nicht gefunden.
        """
        soup = BeautifulSoup(html or "", "lxml")

        for selector in TOTAL_COUNT_SELECTORS:
            elem = soup.select_one(selector)
            if not elem:
                continue
            # Pattern: "123 résultats" oder "1'234 entrées"
            match = TOTAL_COUNT_PATTERN.search(elem.get_text(" "))
            if match:
                digits = re.sub(r"\D", "", match.group(1))
                if digits:
                    return int(digits)

        return None

    @property
    def stats(self) -> dict:
        """Gibt Parser-Statistiken zurück."""
        return {
            "parsed_count": self._parsed_count,
            "skipped_count": self._skipped_count
        }
