"""
Tests für den Suchergebnis-Parser.
"""

import pytest

from vetscraper.parser.listing import ListingParser, FieldRule, FIELD_RULES
from conftest import make_entry, make_page, EMPTY_PAGE


@pytest.fixture
def parser():
    return ListingParser()


class TestParse:
    """Tests für ListingParser.parse."""

    def test_full_entry(self, parser):
        """Alle Felder einer vollständigen Karte."""
        html = make_page([make_entry()])
        listings = parser.parse(html, "Vaud")

        assert len(listings) == 1
        listing = listings[0]
        assert listing.name == "Cabinet Vétérinaire du Lac"
        assert listing.adresse == "Rue du Lac 12 1003 Lausanne"
        assert listing.telefon == "+41211234567"
        assert listing.email == "info@vet-lac.ch"
        assert listing.website == "https://www.vet-lac.ch"
        assert listing.fachgebiet == "Vétérinaire"
        assert listing.kanton == "Vaud"

    def test_address_from_two_fragments(self, parser):
        """Adresse aus zwei Fragmenten wird mit Leerzeichen verbunden."""
        html = make_page([make_entry(address_parts=["Rue Example 1", "1000 Lausanne"])])
        listing = parser.parse(html, "Vaud")[0]
        assert listing.adresse == "Rue Example 1 1000 Lausanne"

    def test_address_fragments_trimmed(self, parser):
        """Whitespace in Fragmenten wird bereinigt."""
        html = make_page([make_entry(address_parts=["  Route de Berne 5 ", "\n1700   Fribourg "])])
        listing = parser.parse(html, "Fribourg")[0]
        assert listing.adresse == "Route de Berne 5 1700 Fribourg"

    def test_phone_from_tel_link(self, parser):
        """tel:-Link wird dem sichtbaren Text vorgezogen."""
        html = make_page([make_entry(phone_href="tel:+41211234567")])
        assert parser.parse(html, "Vaud")[0].telefon == "+41211234567"

    def test_phone_fallback_to_text(self, parser):
        """Ohne tel:-Link wird der Text von .phone verwendet."""
        entry = (
            '<article class="entry"><h2>Vet Jura</h2>'
            '<span class="phone">032 111 22 33</span></article>'
        )
        listing = parser.parse(make_page([entry]), "Jura")[0]
        assert listing.telefon == "032 111 22 33"

    def test_email_fallback_to_text(self, parser):
        """Ohne mailto:-Link wird der Text von .email verwendet."""
        entry = (
            '<article class="entry"><h2>Vet Jura</h2>'
            '<span class="email">vet@jura.ch</span></article>'
        )
        listing = parser.parse(make_page([entry]), "Jura")[0]
        assert listing.email == "vet@jura.ch"

    def test_directory_link_is_not_website(self, parser):
        """Links auf das Verzeichnis selbst zählen nicht als Website."""
        html = make_page([make_entry(website=None)])
        assert parser.parse(html, "Vaud")[0].website == ""

    def test_website_fallback_to_http_link(self, parser):
        """Ohne a.website wird ein externer http-Link verwendet."""
        entry = (
            '<div class="entry"><h2>Vet Sion</h2>'
            '<a href="https://www.vet-sion.ch">www.vet-sion.ch</a></div>'
        )
        listing = parser.parse(make_page([entry]), "Valais")[0]
        assert listing.website == "https://www.vet-sion.ch"

    def test_missing_fields_are_empty(self, parser):
        """Fehlende Felder ergeben leere Strings."""
        entry = '<div class="entry"><h2>Vet Minimal</h2></div>'
        listing = parser.parse(make_page([entry]), "Genève")[0]
        assert listing.adresse == ""
        assert listing.telefon == ""
        assert listing.email == ""
        assert listing.website == ""
        assert listing.fachgebiet == ""

    def test_name_fallback_selectors(self, parser):
        """Name aus .title wenn kein h2 vorhanden."""
        entry = '<div class="entry"><span class="title">Clinique du Jura</span></div>'
        assert parser.parse(make_page([entry]), "Jura")[0].name == "Clinique du Jura"

    def test_entries_without_name_dropped(self, parser):
        """Karten ohne Name werden verworfen."""
        entries = [
            make_entry(name="Vet A"),
            '<div class="entry"><div class="category">Vétérinaire</div></div>',
            make_entry(name="   "),
            make_entry(name="Vet B"),
        ]
        listings = parser.parse(make_page(entries), "Vaud")
        assert [l.name for l in listings] == ["Vet A", "Vet B"]
        assert all(l.name for l in listings)
        assert parser.stats["skipped_count"] == 2

    def test_card_info_fallback(self, parser):
        """Ohne .entry werden .card-info Karten verwendet."""
        html = (
            '<html><body>'
            '<div class="card-info"><h2>Vet Neuchâtel</h2></div>'
            '<div class="card-info"><h2>Vet La Chaux-de-Fonds</h2></div>'
            '</body></html>'
        )
        listings = parser.parse(html, "Neuchâtel")
        assert [l.name for l in listings] == ["Vet Neuchâtel", "Vet La Chaux-de-Fonds"]

    def test_empty_page(self, parser):
        """Seite ohne Ergebnisse liefert leere Liste."""
        assert parser.parse(EMPTY_PAGE, "Vaud") == []

    def test_empty_html(self, parser):
        """Leerer Inhalt wirft keinen Fehler."""
        assert parser.parse("", "Vaud") == []

    def test_order_preserved(self, parser):
        """Reihenfolge der Karten bleibt erhalten."""
        names = [f"Vet {i}" for i in range(5)]
        listings = parser.parse(make_page([make_entry(name=n) for n in names]), "Vaud")
        assert [l.name for l in listings] == names

    def test_custom_field_rules(self):
        """Selektor-Tabelle kann ersetzt werden."""
        rules = dict(FIELD_RULES)
        rules["fachgebiet"] = FieldRule(selectors=(".specialty",))
        parser = ListingParser(field_rules=rules)
        entry = '<div class="entry"><h2>Vet</h2><p class="specialty">Équins</p></div>'
        assert parser.parse(make_page([entry]), "Vaud")[0].fachgebiet == "Équins"


class TestPagination:
    """Tests für die Pagination-Erkennung."""

    def test_next_link_present(self, parser):
        """a.next signalisiert weitere Seite."""
        assert parser.has_next_page(make_page([make_entry()], has_next=True)) is True

    def test_aria_label_next(self, parser):
        """aria-label 'Page suivante' signalisiert weitere Seite."""
        html = '<html><body><a aria-label="Page suivante" href="?page=3">›</a></body></html>'
        assert parser.has_next_page(html) is True

    def test_no_next_link(self, parser):
        """Ohne Steuerelement keine weitere Seite."""
        assert parser.has_next_page(make_page([make_entry()])) is False

    def test_empty_page_has_no_next(self, parser):
        assert parser.has_next_page(EMPTY_PAGE) is False


class TestTotalResults:
    """Tests für die Gesamtanzahl."""

    def test_total_found(self, parser):
        html = make_page([make_entry()], total=42)
        assert parser.extract_total_results(html) == 42

    def test_total_with_thousands_separator(self, parser):
        html = "<html><body><h1>1'234 résultats pour vétérinaire</h1></body></html>"
        assert parser.extract_total_results(html) == 1234

    def test_total_missing(self, parser):
        assert parser.extract_total_results(make_page([make_entry()])) is None
