"""
Report model shared by the edge agent and the central collector.
"""

from pydantic import BaseModel, ConfigDict, Field


class Report(BaseModel):
    """One device's point-in-time metric sample."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    device_id: str = Field(min_length=1)
    os_info: str
    # Not clamped: agents may report values outside [0, 100]
    cpu_usage: float
    ram_used_mb: int = Field(ge=0)
    ram_total_mb: int = Field(ge=0)
    last_seen: str

    @property
    def ram_usage_percent(self) -> float:
        """RAM usage as a percentage, 0 when total is unknown."""
        if self.ram_total_mb <= 0:
            return 0.0
        return self.ram_used_mb / self.ram_total_mb * 100

    def to_json(self) -> str:
        return self.model_dump_json()

    @classmethod
    def from_json(cls, data: str | bytes) -> "Report":
        return cls.model_validate_json(data)
