"""
orderdesk.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, and repositories.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Every owned table carries either `user_id` or an `order_id` whose order
# carries `user_id`; `orderdesk.services.access` depends on that layout.
