from typing import List

from pydantic import BaseModel


class SuccessResponse(BaseModel):
    success: bool = True


class UploadResponse(BaseModel):
    success: bool = True
    urls: List[str]


class HealthResponse(BaseModel):
    status: str
    message: str
    timestamp: int
    database: str
