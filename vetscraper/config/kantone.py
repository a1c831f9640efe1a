"""
Kantone der Suisse romande, die nacheinander durchsucht werden.

Die Schreibweise entspricht der Suchmaske von tel.search.ch (französisch,
mit Akzenten) und wird unverändert in die Such-URL kodiert.
"""

from typing import List, Optional


KANTONE_SUISSE_ROMANDE = [
    "Vaud",
    "Genève",
    "Neuchâtel",
    "Jura",
    "Fribourg",
    "Valais",
]


def get_kantone(auswahl: Optional[List[str]] = None) -> List[str]:
    """
    Gibt die zu durchsuchenden Kantone zurück.

    Args:
        auswahl: Optional - nur diese Kantone (Groß-/Kleinschreibung egal).

    Returns:
        Liste von Kanton-Namen in der offiziellen Schreibweise.

    Raises:
        ValueError: Wenn ein Kanton nicht zur Suisse romande gehört.
    """
    if not auswahl:
        return list(KANTONE_SUISSE_ROMANDE)

    lookup = {k.lower(): k for k in KANTONE_SUISSE_ROMANDE}
    kantone = []
    for name in auswahl:
        kanton = lookup.get(name.strip().lower())
        if kanton is None:
            raise ValueError(
                f"Unbekannter Kanton '{name}' (erlaubt: {', '.join(KANTONE_SUISSE_ROMANDE)})"
            )
        if kanton not in kantone:
            kantone.append(kanton)
    return kantone
