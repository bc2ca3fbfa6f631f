"""
orderdesk.services

Service layer.

Responsibilities:
- Ownership enforcement shared by all resource routers.
- Dashboard aggregation.
"""

# Package marker.
