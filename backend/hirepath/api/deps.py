"""Shared dependencies for API endpoints.

Authentication and session handling live outside this service; endpoints
only need a database session and the notifier.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hirepath.core.database import get_db
from hirepath.notifications import Notifier, get_notifier

DbSession = Annotated[AsyncSession, Depends(get_db)]
"""Request-scoped database session, committed when the request succeeds."""

CurrentNotifier = Annotated[Notifier, Depends(get_notifier)]
"""Process-wide notifier."""
