from pydantic import BaseModel
class HealthResponse(BaseModel):
    """Health check response model"""
    status: str
    client_ready: bool
    backend_version: str = "1.0.0"
