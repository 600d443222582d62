from enum import Enum


class ValueKind(str, Enum):
    INTEGER = "integer"
    REAL = "real"
    TEXT = "text"
