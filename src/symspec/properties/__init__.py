from .base import PropertyAccessor
from .collection import CollectionMixin
from .comparable import ComparableMixin
from .property import Property, PropertySpecification
from .strings import StringMixin

__all__ = [
    "CollectionMixin",
    "ComparableMixin",
    "Property",
    "PropertyAccessor",
    "PropertySpecification",
    "StringMixin",
]
