from datetime import datetime, timezone

from sqlalchemy import Column, BigInteger, Integer, String, DateTime
from sqlalchemy.types import TypeDecorator
from image_api.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """Timezone-aware UTC datetimes on every backend.

    SQLite stores no offset, so values read back are naive; they are tagged
    as UTC here so a record serializes the same before and after a reload.
    """

    impl = DateTime
    cache_ok = True

    def __init__(self) -> None:
        super().__init__(timezone=True)

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class Image(Base):
    __tablename__ = "images"

    # SQLite only autoincrements INTEGER primary keys
    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    file_path = Column(String(255), nullable=False)
    # Microsecond timestamps set client-side keep newest-first ordering stable
    created_at = Column(UTCDateTime(), default=_utcnow, nullable=False, index=True)
    updated_at = Column(UTCDateTime(), default=_utcnow, onupdate=_utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<Image id={self.id} title={self.title!r}>"
