"""Runtime values produced by the evaluator.

All values are immutable except StringObject and ArrayObject, which `pop`/`removeLast` mutate in place. ReturnObject and
ErrorObject are control-flow signals: they are only ever propagated, never operated on as data.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum


class ObjectType(Enum):
    INTEGER = "INTEGER"
    BOOLEAN = "BOOLEAN"
    STRING = "STRING"
    ARRAY = "ARRAY"
    FUNCTION = "FUNCTION"
    BUILTIN = "BUILTIN"
    RETURN = "RETURN"
    ERROR = "ERROR"
    NULL = "NULL"


class EvaluatedObject(ABC):
    """Superclass of every runtime value."""
    type: ObjectType

    @abstractmethod
    def __str__(self):
        """This method should return the textual rendering of the value."""


def int32(value):
    """Wraps value to a signed 32-bit integer."""
    return (value + 2 ** 31) % 2 ** 32 - 2 ** 31


@dataclass(frozen=True)
class IntegerObject(EvaluatedObject):
    value: int
    type = ObjectType.INTEGER

    def __str__(self):
        return str(self.value)


@dataclass(frozen=True)
class BooleanObject(EvaluatedObject):
    value: bool
    type = ObjectType.BOOLEAN

    def __str__(self):
        return "true" if self.value else "false"


@dataclass
class StringObject(EvaluatedObject):
    value: str
    type = ObjectType.STRING

    def __str__(self):
        return f"\"{self.value}\""


@dataclass
class ArrayObject(EvaluatedObject):
    elements: list = field(default_factory=list)
    type = ObjectType.ARRAY

    def __str__(self):
        return "[" + ",".join(str(element) for element in self.elements) + "]"


@dataclass(eq=False)
class FunctionObject(EvaluatedObject):
    params: tuple
    body: object
    environment: object  # captured at definition site
    type = ObjectType.FUNCTION

    def __str__(self):
        return f"fn ({','.join(str(param) for param in self.params)}) {self.body}"


@dataclass(frozen=True, eq=False)
class BuiltinFunction(EvaluatedObject):
    name: str
    implementation: object
    usage: str
    type = ObjectType.BUILTIN

    def __call__(self, *args):
        return self.implementation(*args)

    def __str__(self):
        return self.usage


@dataclass(frozen=True)
class ReturnObject(EvaluatedObject):
    value: EvaluatedObject
    type = ObjectType.RETURN

    def __str__(self):
        return f"return {self.value}"


@dataclass(frozen=True)
class ErrorObject(EvaluatedObject):
    message: str
    type = ObjectType.ERROR

    def __str__(self):
        return self.message


class NullObject(EvaluatedObject):
    type = ObjectType.NULL

    def __str__(self):
        return "null"

    def __repr__(self):
        return "NULL"


NULL = NullObject()
