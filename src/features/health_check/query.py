from pydantic import BaseModel
from typing import Dict, Literal

class HealthCheckResponse(BaseModel):
    status: Literal["ok", "error"]
    services: Dict[str, str]
