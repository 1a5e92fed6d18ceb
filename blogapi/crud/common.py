import uuid

from blogapi.core.errors import NotFoundError, ValidationError


def ensure_valid_id(value: str) -> str:
    try:
        return str(uuid.UUID(value))
    except (TypeError, ValueError, AttributeError):
        raise ValidationError("invalid id")


def get_or_404(db, model, resource_id: str, kind: str):
    resource_id = ensure_valid_id(resource_id)
    instance = db.query(model).filter(model.id == resource_id).first()
    if instance is None:
        raise NotFoundError(kind, resource_id)
    return instance
