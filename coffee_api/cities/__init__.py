"""
City name handling.

Responsibilities:
- Map any known alias of a city to the name stored in the dataset.
- Provide user-friendly display names for stored city names.
"""
