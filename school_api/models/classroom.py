from sqlalchemy import Column, Integer, String, Boolean, JSON, Index, CheckConstraint
from sqlalchemy.orm import relationship
from .base import TenantModel


class Classroom(TenantModel):
    __tablename__ = "classrooms"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)  # e.g., "Room 101"
    capacity = Column(Integer, nullable=False)
    resources = Column(JSON, nullable=False, default=list)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    school = relationship("School", back_populates="classrooms")
    students = relationship("Student", back_populates="classroom")

    __table_args__ = (
        CheckConstraint("capacity > 0", name="ck_classrooms_capacity_positive"),
        Index(
            "uq_classrooms_active_name_school",
            "name",
            "school_id",
            unique=True,
            postgresql_where=is_active.is_(True),
            sqlite_where=is_active.is_(True),
        ),
    )

    def __repr__(self):
        # Access __dict__ directly to avoid loading attributes
        name = self.__dict__.get('name', '<detached>')
        school_id = self.__dict__.get('school_id', '<detached>')
        return f"<Classroom(name={name}, school_id={school_id})>"
