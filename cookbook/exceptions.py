"""
Cookbook Exceptions.

Errors raised by Cookbook itself (bad query parameters, unknown fields,
unresolvable relations). ORM errors (DoesNotExist, ValidationError,
DatabaseError) are never wrapped.
"""

from typing import Any

# code → human readable message, rendered in API error bodies
ERROR_MESSAGES = {
    "INVALID_SORT": "_sort must be 'field[:ASC|DESC]', comma separated",
    "INVALID_START": "_start must be a non-negative integer",
    "INVALID_LIMIT": "_limit must be an integer >= -1",
    "INVALID_OPERATOR": "Unknown filter operator",
    "INVALID_VALUE": "Value does not match the field type",
    "UNKNOWN_FIELD": "Field is neither an attribute nor a relation",
    "INVALID_RELATION": "Relation value does not resolve to existing rows",
}


class CookbookError(Exception):
    """
    Rejected query parameter or payload.

    Usage:
        raise CookbookError("UNKNOWN_FIELD", resource="recipe", field="colour")

    Attributes:
        code: One of ERROR_MESSAGES
        details: Offending field, value, relation...
    """

    def __init__(self, code: str, **details: Any):
        self.code = code
        self.details = details
        super().__init__(code, details)

    @property
    def message(self) -> str:
        return ERROR_MESSAGES.get(self.code, self.code)

    def as_dict(self) -> dict:
        """Error body for API responses: code, message, then the details."""
        return {"code": self.code, "message": self.message, **self.details}

    def __str__(self) -> str:
        context = ", ".join(f"{key}={value!r}" for key, value in self.details.items())
        return f"{self.code}: {self.message}" + (f" ({context})" if context else "")
