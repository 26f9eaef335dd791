from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from lighthouse.config import Settings, settings as default_settings


class ExecOptions(BaseModel):
    """Options used to create every exec session.

    Attaching to an exec session never re-specifies these; the values given
    at exec-create time are the only ones the engine sees.
    """

    model_config = ConfigDict(frozen=True)

    attach_stdout: bool = Field(default=True, description="Capture stdout")
    attach_stderr: bool = Field(default=False, description="Capture stderr")
    tty: bool = Field(default=False, description="Allocate a pseudo-TTY")
    privileged: bool = Field(default=False, description="Run the command privileged")
    user: str = Field(default="", description="User to run the command as")

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "ExecOptions":
        config = config or default_settings
        return cls(
            attach_stdout=config.exec_attach_stdout,
            attach_stderr=config.exec_attach_stderr,
            tty=config.exec_tty,
        )
