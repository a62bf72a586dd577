"""
Error taxonomy for the catalog API.

Every error carries the HTTP status it maps to and a stable ``kind`` string.
The HTTP layer renders them as ``{"message": ..., "kind": ...}``.
"""
from typing import Any, Dict


class AppError(Exception):
    status_code = 500
    kind = "InternalError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "kind": self.kind}


class NotFound(AppError):
    """The entity id does not exist."""
    status_code = 404
    kind = "NotFound"


class ValidationError(AppError):
    """Missing required field, failed uniqueness or bad value."""
    status_code = 400
    kind = "ValidationError"


class RangeError(ValidationError):
    """A numeric value falls outside its allowed range."""
    kind = "RangeError"


class MissingReference(AppError):
    """A referenced entity does not exist."""
    status_code = 404
    kind = "ReferenceError"

    def __init__(self, entity: str, ref: Any):
        super().__init__(f"{entity.capitalize()} {ref} not found")
        self.entity = entity
        self.ref = ref

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["missing"] = {"kind": self.entity, "id": str(self.ref)}
        return data


class TotalMismatch(AppError):
    """The claimed order total disagrees with the computed one."""
    status_code = 400
    kind = "TotalMismatch"

    def __init__(self, calculated: float, claimed: float):
        super().__init__("Total amount does not match product prices")
        self.calculated = calculated
        self.claimed = claimed

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["calculated"] = self.calculated
        data["claimed"] = self.claimed
        return data


class NotImplementedCapability(AppError):
    status_code = 501
    kind = "NotImplemented"


class InternalError(AppError):
    """Persistence failure unrelated to the request input."""
