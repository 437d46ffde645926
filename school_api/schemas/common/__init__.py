from .base import CamelModel, SchoolRef, ClassroomRef, Envelope, EntityId, MAX_ID

__all__ = ['CamelModel', 'SchoolRef', 'ClassroomRef', 'Envelope', 'EntityId', 'MAX_ID']
