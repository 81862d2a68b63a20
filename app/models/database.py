from datetime import datetime, timezone
from sqlalchemy import BigInteger, Integer, String, DateTime, Index
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, validates
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from app.core.config import settings
from app.core.exceptions import ValidationError

IP_ADDRESS_MAX_LENGTH = 45  # longest textual IPv6 form


class Base(DeclarativeBase):
    pass


class UserConnection(Base):
    __tablename__ = "user_connections"
    __table_args__ = (
        Index("ix_user_connections_ip_address", "ip_address"),
        Index("ix_user_connections_user_id_timestamp", "user_id", "timestamp"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    ip_address: Mapped[str] = mapped_column(String(IP_ADDRESS_MAX_LENGTH), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    @validates("ip_address")
    def validate_ip_address_length(self, key: str, value: str) -> str:
        """Reject values the ip_address column cannot hold."""
        if value is None or len(value) > IP_ADDRESS_MAX_LENGTH:
            raise ValidationError(
                f"ip_address must be at most {IP_ADDRESS_MAX_LENGTH} characters"
            )
        return value


# --- Database engine / session ---

engine = create_async_engine(settings.DB_CONNECTION, echo=False)
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncSession:
    async with async_session() as session:
        yield session
