from pydantic import BaseModel, Field
from typing import Dict
from enum import Enum

# --- Enums ---
class StorageMode(str, Enum):
    REDIS = "redis"
    MONGODB = "mongodb"
    LOCAL = "local"

class CacheStatus(str, Enum):
    HIT = "HIT"
    MISS = "MISS"

# --- API Response Models ---
class CacheHealth(BaseModel):
    backend: StorageMode
    reachable: bool

class HealthResponse(BaseModel):
    status: str = Field(..., description="'ok' or 'degraded' when the cache is unreachable")
    service: str
    cache: CacheHealth

class RootResponse(BaseModel):
    message: str
    status: str
    endpoints: Dict[str, str] = {}
    version: str

class ErrorResponse(BaseModel):
    detail: str
