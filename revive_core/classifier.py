"""Capability checks the encoder and reviver consume.

The core never builds derived cells or callables itself; it only asks a
``Classifier`` what a value *is* and, when reviving, for an empty mutable cell.
Embedding applications with their own reactive library pass a subclass.
"""
from __future__ import annotations

from enum import Enum
from typing import Any

from . import reactivity


class Kind(str, Enum):
    OPAQUE    = "opaque"
    DERIVED   = "derived"
    CELL      = "cell"
    ARRAY     = "array"
    OBJECT    = "object"
    PRIMITIVE = "primitive"


class Classifier:
    def is_opaque(self, value: Any) -> bool:
        return callable(value) and not reactivity.is_ref(value)

    def is_derived(self, value: Any) -> bool:
        return reactivity.is_computed(value)

    def is_cell(self, value: Any) -> bool:
        return reactivity.is_ref(value) and not reactivity.is_computed(value)

    def is_array(self, value: Any) -> bool:
        return isinstance(value, list)

    def is_object(self, value: Any) -> bool:
        return isinstance(value, dict)

    def make_cell(self) -> Any:
        return reactivity.ref()

    def classify(self, value: Any) -> Kind:
        # priority order matters: a derived cell is also a cell
        if self.is_opaque(value):
            return Kind.OPAQUE
        if self.is_derived(value):
            return Kind.DERIVED
        if self.is_cell(value):
            return Kind.CELL
        if self.is_array(value):
            return Kind.ARRAY
        if self.is_object(value):
            return Kind.OBJECT
        return Kind.PRIMITIVE


DEFAULT_CLASSIFIER = Classifier()
