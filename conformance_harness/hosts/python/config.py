"""Configuration for the Python host."""

from pydantic import BaseModel, Field


class PythonHostConfig(BaseModel):
    """Configuration for the Python host."""

    resource_base_url: str = Field(
        default="http://web-platform.test:8000",
        description="Origin that test resources are served from",
    )
    request_timeout: float = Field(
        default=30.0, gt=0, description="Seconds allowed per resource fetch"
    )
