from sqlalchemy import Column, String, Integer, Boolean, Index
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


class School(TimestampMixin, Base):
    """
    School model, the root of the tenant hierarchy.
    Deleting a school only clears ``is_active``; classrooms and students
    keep pointing at it.
    """
    __tablename__ = "schools"

    # Primary key
    id = Column(Integer, primary_key=True)

    # Basic information
    name = Column(String(255), nullable=False)
    address = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=True)
    email = Column(String(255), nullable=True)
    website = Column(String(255), nullable=True)

    # Soft-delete flag
    is_active = Column(Boolean, default=True, nullable=False)

    classrooms = relationship("Classroom", back_populates="school", lazy='select')
    students = relationship("Student", back_populates="school", lazy='select')
    users = relationship("User", back_populates="school", lazy='select')

    __table_args__ = (
        # Names are only unique among active schools
        Index(
            "uq_schools_active_name",
            "name",
            unique=True,
            postgresql_where=is_active.is_(True),
            sqlite_where=is_active.is_(True),
        ),
    )

    def __repr__(self):
        return f"<School(id={self.id}, name={self.name}, is_active={self.is_active})>"
