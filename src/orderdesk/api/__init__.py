"""
orderdesk.api

HTTP API package (FastAPI).

Responsibilities:
- App factory, dependency wiring, error mapping and resource routers.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Import `orderdesk.api.app.create_app` explicitly; nothing is re-exported here.
