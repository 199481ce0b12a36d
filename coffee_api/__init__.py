"""
Coffee Places API.

Read-only, paginated and filterable access to coffee places in the
Netherlands, sourced from OpenStreetMap and enriched with Google Places data.
"""
