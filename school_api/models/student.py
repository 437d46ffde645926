from sqlalchemy import Column, Integer, String, Date, ForeignKey, Boolean
from sqlalchemy.orm import relationship
from .base import TenantModel

class Student(TenantModel):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    date_of_birth = Column(Date, nullable=True)

    # school_id comes from TenantModel and only changes through a transfer
    classroom_id = Column(Integer, ForeignKey('classrooms.id'), nullable=True, index=True)

    # Cleared on unenrollment; the row itself is kept
    is_enrolled = Column(Boolean, default=True, nullable=False)

    school = relationship("School", back_populates="students")
    classroom = relationship("Classroom", back_populates="students")

    def __repr__(self):
        return f"<Student(id={self.__dict__.get('id')}, school_id={self.__dict__.get('school_id')})>"
