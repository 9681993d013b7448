from pydantic import BaseModel, ConfigDict

from pqs.core.models.core import DataType


class Column(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    table: str
    datatype: DataType

    def __str__(self) -> str:
        return f"{self.table}.{self.name}"


class Table(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    columns: tuple[Column, ...] = ()


def declared_type(column: Column) -> DataType:
    return column.datatype
