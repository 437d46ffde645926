from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, Enum
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin
from school_api.schemas.user.role import UserRoleEnum


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(
        Enum(UserRoleEnum, name="user_role", values_callable=lambda roles: [r.value for r in roles]),
        nullable=False
    )
    is_active = Column(Boolean, default=True, nullable=False)

    # Required for school_admin, absent for superadmin
    school_id = Column(Integer, ForeignKey("schools.id"), nullable=True, index=True)

    school = relationship("School", back_populates="users")

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username}, role={self.role})>"
