"""
Coffee place query engine.

Responsibilities:
- Validate raw query-string parameters into a typed ``PlaceQuery``.
- Compile the query into storage-agnostic predicates.
- Count, order, page or randomly sample matching records from a ``PlaceStore``.
- Normalize raw records into the public ``Place`` shape.
"""
