from enum import Enum as PyEnum
from typing import Type

from sqlalchemy import Enum


def str_enum(enum_cls: Type[PyEnum], length: int = 20) -> Enum:
    """VARCHAR-backed enum column that stores member values ("In Progress") rather than names."""
    return Enum(
        enum_cls,
        native_enum=False,
        length=length,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )
