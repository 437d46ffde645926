# base.py
from sqlalchemy import Column, Integer, ForeignKey, DateTime
from sqlalchemy.orm import declared_attr
from sqlalchemy.sql import func

from school_api.core.database import Base


class TimestampMixin:
    """created_at / updated_at maintained by the database"""

    @declared_attr
    def created_at(cls):
        return Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    @declared_attr
    def updated_at(cls):
        return Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class TenantModel(TimestampMixin, Base):
    """
    A base for multi-tenant rows.
    This ensures models have a school_id foreign key.
    """
    __abstract__ = True

    # Simple foreign key to schools - relationships are defined in child classes
    @declared_attr
    def school_id(cls):
        return Column(Integer, ForeignKey("schools.id"), nullable=False, index=True)
