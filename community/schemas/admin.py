from typing import List

from pydantic import BaseModel


class DepartmentCount(BaseModel):
    department: str | None
    count: int


class StatsResponse(BaseModel):
    total: int
    today: int
    categories: List[DepartmentCount]


class DeleteResponse(BaseModel):
    success: bool = True
    deleted: int
