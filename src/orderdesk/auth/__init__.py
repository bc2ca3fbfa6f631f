"""
orderdesk.auth

Authentication package.

Responsibilities:
- Verify Telegram mini-app assertions (initData).
- Issue and verify stateless session tokens.
- Resolve the request principal from credentials (FastAPI dependency).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Everything here is configured through `AuthConfig`; nothing reads env vars.
