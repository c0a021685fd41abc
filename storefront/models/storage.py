from datetime import datetime, timezone
from sqlmodel import Field, SQLModel, Column
from sqlalchemy import Text

class StorageSlot(SQLModel, table=True):
    """One string-keyed slot of a client's durable storage.

    Slots are partitioned by origin (a browser profile or device), so two
    tabs on the same origin share every key.
    """
    origin: str = Field(primary_key=True)
    key: str = Field(primary_key=True)

    value: str = Field(sa_column=Column(Text, nullable=False))

    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
