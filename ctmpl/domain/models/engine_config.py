"""Engine settings (parsed from YAML)."""

from pydantic import BaseModel, ConfigDict


class EngineConfig(BaseModel):
    """Settings shared by every template the engine parses.

    The whitespace flags are passed straight to the Jinja2 environment.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    encoding: str = "utf-8"
    trim_blocks: bool = False
    lstrip_blocks: bool = False
    keep_trailing_newline: bool = True
