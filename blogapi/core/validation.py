from typing import Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from blogapi.core.errors import ValidationError, first_error_message

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def validate_payload(schema: Type[SchemaT], data: dict) -> SchemaT:
    """Validate ``data`` against ``schema`` or raise ``ValidationError`` with the first problem."""
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(first_error_message(e.errors())) from e
