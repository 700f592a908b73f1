"""Per-call execution context supplied by the host runtime."""

from pydantic import BaseModel, ConfigDict, Field


class ExecutionContext(BaseModel):
    """Authenticated caller identity and logical clock for one call."""

    model_config = ConfigDict(frozen=True)

    caller: str = Field(min_length=1)
    clock: int = Field(default=0, ge=0)  # block height
