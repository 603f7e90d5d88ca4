from pydantic import BaseModel


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class HealthResponse(BaseModel):
    service: str
    status: str = "running"
