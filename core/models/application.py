# ============================================================================
# APPLICATION MODELS
# ============================================================================
# STATUS: Core model - Application master metadata
# PURPOSE: Describe the coordinating process and its historical attempts
# CREATED: 07 OCT 2026
# EXPORTS: ApplicationInfo, AMInfo
# DEPENDENCIES: pydantic
# ============================================================================
"""
Application Models

ApplicationInfo describes the running application master that hosts
the job registry. AMInfo is one historical execution of it; a job keeps
the full list so restarts remain visible.

Times are epoch milliseconds, 0 meaning "not set".
"""

from pydantic import BaseModel, Field


class ApplicationInfo(BaseModel):
    """The application master this API is serving."""
    app_id: str = Field(..., max_length=128)
    name: str = ""
    user: str = ""
    start_time: int = Field(default=0, ge=0)


class AMInfo(BaseModel):
    """One execution attempt of the application master."""
    attempt_number: int = Field(..., ge=1)
    start_time: int = Field(default=0, ge=0)
    container_id: str = ""
    node_manager_host: str = ""
    node_manager_port: int = Field(default=0, ge=0)
    node_manager_http_port: int = Field(default=0, ge=0)

    @property
    def node_id(self) -> str:
        return f"{self.node_manager_host}:{self.node_manager_port}"

    @property
    def node_http_address(self) -> str:
        return f"{self.node_manager_host}:{self.node_manager_http_port}"


__all__ = ["ApplicationInfo", "AMInfo"]
