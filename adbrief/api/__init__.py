"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from adbrief.api import app

    uvicorn adbrief.api:app --reload
"""

from adbrief.api.app import app

__all__ = ["app"]
