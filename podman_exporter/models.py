"""
Pydantic models for Podman REST API responses.

Field aliases are the PascalCase keys Podman uses on the wire. Decoding
follows the Podman client libraries: unknown keys are ignored, missing or
null keys fall back to zero values, and values of the wrong JSON type are
rejected rather than coerced (``"0.06"`` is not a number).
"""

from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr, model_validator

Uint = Annotated[int, Field(strict=True, ge=0)]


class PodmanModel(BaseModel):
    """Base for immutable, alias-keyed Podman payloads."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    @model_validator(mode='before')
    @classmethod
    def nulls_as_zero_values(cls, data: Any) -> Any:
        """Podman encodes empty slices and unset values as null."""
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class Platform(PodmanModel):
    name: StrictStr = Field("", alias="Name")


class RuntimeVersionInfo(PodmanModel):
    """Response of ``GET /v3.0.0/libpod/version``."""

    platform: Platform = Field(default_factory=Platform, alias="Platform")
    version: StrictStr = Field("", alias="Version")
    api_version: StrictStr = Field("", alias="ApiVersion")
    min_api_version: StrictStr = Field("", alias="MinAPIVersion")
    git_commit: StrictStr = Field("", alias="GitCommit")
    go_version: StrictStr = Field("", alias="GoVersion")
    os: StrictStr = Field("", alias="Os")
    arch: StrictStr = Field("", alias="Arch")
    kernel_version: StrictStr = Field("", alias="KernelVersion")
    build_time: StrictStr = Field("", alias="BuildTime")

    @property
    def platform_name(self) -> str:
        return self.platform.name


class ContainerStatSample(PodmanModel):
    """Resource usage of one running container, as reported by podman-stats."""

    container_id: StrictStr = Field("", alias="ContainerID")
    name: StrictStr = Field("", alias="Name")
    cpu_percent: StrictFloat = Field(0.0, alias="CPU")
    cpu_average_percent: StrictFloat = Field(0.0, alias="AvgCPU")
    cpu_usage_nanos: Uint = Field(0, alias="CPUNano")
    cpu_kernel_usage_nanos: Uint = Field(0, alias="CPUSystemNano")
    mem_usage_bytes: Uint = Field(0, alias="MemUsage")
    mem_limit_bytes: Uint = Field(0, alias="MemLimit")
    mem_percent: StrictFloat = Field(0.0, alias="MemPerc")
    net_input_bytes: Uint = Field(0, alias="NetInput")
    net_output_bytes: Uint = Field(0, alias="NetOutput")
    block_input_bytes: Uint = Field(0, alias="BlockInput")
    block_output_bytes: Uint = Field(0, alias="BlockOutput")
    pid_count: Uint = Field(0, alias="PIDs")

    # Returned by Podman but not exported
    per_cpu: Optional[List[Uint]] = Field(None, alias="PerCPU")
    system_nanos: Uint = Field(0, alias="SystemNano")
    data_points: StrictInt = Field(0, alias="DataPoints")
    uptime: Uint = Field(0, alias="UpTime")
    duration: Uint = Field(0, alias="Duration")


class ContainerStatsReport(PodmanModel):
    """Response of ``GET /v3.0.0/libpod/containers/stats?stream=false``."""

    error: Optional[Any] = Field(None, alias="Error")
    stats: List[ContainerStatSample] = Field(default_factory=list, alias="Stats")
