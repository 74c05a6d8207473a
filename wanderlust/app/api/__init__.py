"""
HTTP layer: the routers for listings, reviews and users plus the guard
dependencies they share (``deps``).  ``router`` aggregates everything
and ends with the catch-all not-found route.
"""
