from typing import Optional
from pydantic import BaseModel, Field, field_validator

class ProcessorConfig(BaseModel):
    thread_count: int = Field(default=2, ge=1)
    ffmpeg_options: Optional[str] = None
    output: Optional[str] = None  # Output pattern, required before a run starts
    overwrite: bool = False
    verbose: bool = False
    delete: bool = False
    eta: bool = False
    ffmpeg_binary: str = "ffmpeg"

    @field_validator("output")
    @classmethod
    def validate_output(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Output pattern must not be empty")
        return v

    @field_validator("ffmpeg_binary")
    @classmethod
    def validate_binary(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("ffmpeg_binary must not be empty")
        return v

class LoggingConfig(BaseModel):
    log_dir: Optional[str] = None   # Defaults to the platform user log dir
    log_path: Optional[str] = None  # Full path, overrides log_dir
    debug: bool = False

class AppConfig(BaseModel):
    processor: ProcessorConfig = Field(default_factory=ProcessorConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
