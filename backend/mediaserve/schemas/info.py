from pydantic import BaseModel


class ServiceInfo(BaseModel):
    name: str
    version: str
    tags: list[str]
    serve: dict[str, object]
    storage_backend: str
