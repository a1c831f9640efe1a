"""
Datenmodelle für Tierarzt-Einträge und Scraping-Ergebnisse.

Verwendet Pydantic für Validierung und Serialisierung.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, computed_field
from typing import Dict, List
from datetime import datetime


# Bekannte Link-Schemata, die aus Kontaktfeldern entfernt werden
TEL_SCHEME = "tel:"
MAILTO_SCHEME = "mailto:"


def strip_scheme(value: str, scheme: str) -> str:
    """
    Entfernt ein Link-Schema (z.B. "tel:") am Anfang eines Wertes.

    Mehrfaches Anwenden ändert einen bereits bereinigten Wert nicht.
    """
    if not value:
        return ""
    value = value.strip()
    if value.lower().startswith(scheme):
        value = value[len(scheme):].strip()
    return value


class Listing(BaseModel):
    """Ein Tierarzt-Eintrag aus einer Suchergebnis-Seite."""

    model_config = ConfigDict(frozen=True)

    name: str
    adresse: str = ""
    telefon: str = ""
    email: str = ""
    website: str = ""
    fachgebiet: str = ""
    kanton: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Name ist Pflicht - leere Einträge werden verworfen."""
        v = v.strip() if v else ""
        if not v:
            raise ValueError("Name darf nicht leer sein")
        return v

    @field_validator("adresse", "website", "fachgebiet", "kanton")
    @classmethod
    def strip_text(cls, v: str) -> str:
        """Entfernt führende/abschließende Leerzeichen."""
        return v.strip() if v else ""

    @field_validator("telefon")
    @classmethod
    def clean_phone(cls, v: str) -> str:
        """Entfernt das tel:-Schema."""
        return strip_scheme(v, TEL_SCHEME)

    @field_validator("email")
    @classmethod
    def clean_email(cls, v: str) -> str:
        """Entfernt das mailto:-Schema."""
        return strip_scheme(v, MAILTO_SCHEME)

    def to_row(self) -> List[str]:
        """Werte in Export-Reihenfolge (Name, Adresse, Telefon, E-Mail, Website, Fachgebiet, Kanton)."""
        return [
            self.name,
            self.adresse,
            self.telefon,
            self.email,
            self.website,
            self.fachgebiet,
            self.kanton,
        ]


class ScrapingResult(BaseModel):
    """Ergebnis eines Scraping-Durchlaufs über alle Kantone."""
    listings: List[Listing] = Field(default_factory=list)
    pro_kanton: Dict[str, int] = Field(default_factory=dict)
    seiten_gescraped: int = 0
    dauer_sekunden: float = 0.0
    output_path: str = ""
    warnungen: List[str] = Field(default_factory=list)
    start_zeit: datetime = Field(default_factory=datetime.now)

    def add_region(self, kanton: str, listings: List[Listing]) -> None:
        """Hängt die Einträge eines Kantons an (Reihenfolge bleibt erhalten)."""
        self.listings.extend(listings)
        self.pro_kanton[kanton] = self.pro_kanton.get(kanton, 0) + len(listings)

    def add_warning(self, warning: str) -> None:
        """Fügt eine Warnung hinzu."""
        self.warnungen.append(warning)

    @computed_field
    @property
    def total(self) -> int:
        """Gesamtanzahl gesammelter Einträge."""
        return len(self.listings)
