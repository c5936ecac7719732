"""Domain types for the quote service.

Value objects and errors live here, independent from the rate adapters
(SQL, HTTP) so that the quote logic can be tested against plain stubs.
"""

__all__ = [
    "errors",
    "quotes",
]
