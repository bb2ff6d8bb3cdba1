"""
Type mapping utilities for converting record values to normalized type names.
"""

from datetime import date, datetime
from typing import Any, Dict, Optional, Type


class TypeMapper:
    """Maps Python values and declared schema types to normalized type names."""

    # Python type -> normalized type name (bool must be checked before int)
    PYTHON_TYPE_MAP = {
        bool: "boolean",
        int: "number",
        float: "number",
        str: "string",
        list: "array",
        tuple: "array",
        dict: "object",
        datetime: "date",
        date: "date",
    }

    # Declared schema type names used by ingestion layers
    DECLARED_TYPE_MAP: Dict[str, str] = {
        "string": "string",
        "str": "string",
        "text": "string",
        "keyword": "string",
        "number": "number",
        "integer": "number",
        "int": "number",
        "float": "number",
        "double": "number",
        "decimal": "number",
        "boolean": "boolean",
        "bool": "boolean",
        "date": "date",
        "datetime": "date",
        "timestamp": "date",
        "array": "array",
        "list": "array",
        "object": "object",
        "dict": "object",
    }

    @classmethod
    def type_of(cls, value: Any) -> str:
        """
        Get normalized type name for a value.

        Args:
            value: Any record value

        Returns:
            Normalized type string (string, number, boolean, date, array, object, null, unknown)
        """
        if value is None:
            return "null"
        python_type: Optional[Type] = None
        for candidate in cls.PYTHON_TYPE_MAP:
            if isinstance(value, candidate):
                python_type = candidate
                break
        if python_type is None:
            return "unknown"
        return cls.PYTHON_TYPE_MAP[python_type]

    @classmethod
    def normalize_type(cls, declared_type: str) -> str:
        """
        Normalize a declared schema type to a common type name.

        Unrecognized names pass through lowercased.
        """
        key = declared_type.strip().lower()
        return cls.DECLARED_TYPE_MAP.get(key, key)

    @staticmethod
    def is_number(value: Any) -> bool:
        """True for int/float values that are not booleans."""
        return isinstance(value, (int, float)) and not isinstance(value, bool)
