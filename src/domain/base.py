"""Base model shared by all table entities"""

import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel


def generate_uuid() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Naive UTC timestamp, the form every table column stores"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class BaseModel(SQLModel):
    """Common base for SQLModel table entities"""

    pass
