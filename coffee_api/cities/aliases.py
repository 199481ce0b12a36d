from __future__ import annotations

# Canonical (stored) name -> every name a user may search with.
CITY_ALIASES: dict[str, list[str]] = {
    "'s-Gravenhage": ["Den Haag", "The Hague", "'s-Gravenhage", "s-Gravenhage"],
    "'s-Hertogenbosch": ["Den Bosch", "'s-Hertogenbosch", "s-Hertogenbosch"],
}

DISPLAY_NAMES: dict[str, str] = {
    "'s-Gravenhage": "The Hague",
    "'s-Hertogenbosch": "Den Bosch",
}

_REVERSE_ALIASES: dict[str, str] = {
    alias.lower(): canonical
    for canonical, aliases in CITY_ALIASES.items()
    for alias in aliases
}


def canonical_name(city: str) -> str:
    """Return the stored name for ``city``, or ``city`` itself if it has no aliases."""
    return _REVERSE_ALIASES.get(city.strip().lower(), city.strip())


def city_aliases(city: str) -> list[str]:
    """Return every known name for ``city``, the canonical one included."""
    canonical = canonical_name(city)
    return CITY_ALIASES.get(canonical, [canonical])


def display_name(city: str) -> str:
    canonical = canonical_name(city)
    return DISPLAY_NAMES.get(canonical, canonical)
