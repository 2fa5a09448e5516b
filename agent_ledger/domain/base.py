import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, DateTime
from sqlmodel import SQLModel


def generate_uuid() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def timestamp_column(nullable: bool = False) -> Column:
    """Timezone-aware timestamp column, values are written in UTC"""
    return Column(DateTime(timezone=True), nullable=nullable)


class BaseModel(SQLModel):
    """Base class for all persisted ledger entities"""
