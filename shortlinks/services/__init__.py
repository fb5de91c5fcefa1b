"""
Services module for business logic separation.

LinkRegistry is the single service: it owns every read and write of
Link rows, keeping that logic out of the API endpoints and models.
"""

from shortlinks.services.link_registry import LinkRegistry

__all__ = ["LinkRegistry"]
