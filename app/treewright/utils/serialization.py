"""JSON persistence for pydantic models."""

from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel

ModelT = TypeVar("ModelT", bound=BaseModel)


def save_object(obj: BaseModel, path: str | Path) -> None:
    """Write a model to ``path`` as UTF-8 JSON.

    Raises:
        OSError: If the file cannot be written.
    """
    Path(path).write_text(obj.model_dump_json(indent=2), encoding="utf-8")


def load_object(model_type: type[ModelT], path: str | Path) -> ModelT:
    """Read a model of type ``model_type`` from a UTF-8 JSON file.

    Raises:
        OSError: If the file cannot be read.
        pydantic.ValidationError: If the content does not match the model.
    """
    return model_type.model_validate_json(Path(path).read_text(encoding="utf-8"))
