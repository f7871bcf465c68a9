from datetime import datetime, timezone

from sqlalchemy import Text, DateTime, Enum, func
from sqlalchemy.orm import Mapped, mapped_column
from .database import Base
from .validation import TaskStatus


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Task(Base):
    __tablename__ = "tasks"
    # Postgres serials never hand an id out twice; make SQLite behave the same
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    description: Mapped[str] = mapped_column(Text(), nullable=False)
    # Stored as the plain value ("in-progress"), not the member name
    status: Mapped[TaskStatus] = mapped_column(
        Enum(
            TaskStatus,
            native_enum=False,
            length=20,
            values_callable=lambda e: [m.value for m in e],
        ),
        default=TaskStatus.PENDING,
        server_default=TaskStatus.PENDING.value,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Task id={self.id} status={self.status.value!r}>"
