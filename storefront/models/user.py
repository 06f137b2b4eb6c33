from sqlalchemy import Column, Integer, Text, DateTime, JSON, Uuid, Index
from sqlalchemy.sql import func
import uuid
from storefront.db.database import Base

ROLE_USER = 0
ROLE_ADMIN = 1


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=False, unique=True)
    password = Column(Text, nullable=False)  # bcrypt hash
    phone = Column(Text, nullable=False)
    address = Column(JSON, nullable=False)
    answer = Column(Text, nullable=False)
    role = Column(Integer, nullable=False, default=ROLE_USER)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        Index("idx_users_role", "role"),
    )

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
