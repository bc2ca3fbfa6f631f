"""
orderdesk.db.repositories

Repository package.

Responsibilities:
- Group data-access repositories for the persistence layer.
"""

# Package marker; repositories are imported directly from submodules.


# --- Module Notes -----------------------------------------------------------
# Repositories flush but never commit and never check ownership; callers run
# `orderdesk.services.access.OwnershipGuard` first and commit afterwards.
