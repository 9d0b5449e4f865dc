from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, FiniteFloat
from typing import Annotated, List, Tuple


def _reject_bool(value):
    # bool 是 int 的子类，宽松模式下会被当成 0/1
    if isinstance(value, bool):
        raise ValueError("坐标必须是数字")
    return value


Coordinate = Annotated[FiniteFloat, BeforeValidator(_reject_bool)]
Point = Tuple[Coordinate, Coordinate]


class PolygonCreate(BaseModel):
    # 未声明的字段直接拒绝
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    points: List[Point] = Field(..., min_length=3)


class Polygon(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    points: List[Point]
    created_at: str = Field(..., alias="createdAt")
    updated_at: str = Field(..., alias="updatedAt")
