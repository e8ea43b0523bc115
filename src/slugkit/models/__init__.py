from slugkit.models.query import ExistenceQuery
from slugkit.models.record import Entity, Record

__all__ = ["Entity", "ExistenceQuery", "Record"]
