"""
Configuration Schemas.

Pydantic models defining the expected structure of each YAML config file.
Used by AppConfig to validate configuration at load time. If a YAML file
has missing keys, wrong types, or unknown fields, a clear ValidationError
is raised at startup instead of a cryptic KeyError deep in application code.

Each top-level class corresponds to one file in config/settings/:
    ApplicationSchema  → application.yaml
    DatabaseSchema     → database.yaml
    LoggingSchema      → logging.yaml
    SecuritySchema     → security.yaml
    EntriesSchema      → entries.yaml
"""

from pydantic import BaseModel, ConfigDict, Field


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: str
    debug: bool


# =============================================================================
# database.yaml
# =============================================================================


class DatabaseSchema(_StrictBase):
    url: str
    echo: bool


# =============================================================================
# logging.yaml
# =============================================================================


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int
    backup_count: int


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: str
    format: str
    handlers: HandlersSchema


# =============================================================================
# security.yaml
# =============================================================================


class EncryptionSchema(_StrictBase):
    kdf_iterations: int = Field(gt=0)


class SecuritySchema(_StrictBase):
    encryption: EncryptionSchema


# =============================================================================
# entries.yaml
# =============================================================================


class IdentifiersSchema(_StrictBase):
    length_bytes: int = Field(gt=0)
    max_attempts: int = Field(gt=0)


class PaginationSchema(_StrictBase):
    default_limit: int
    max_limit: int


class ClassificationSchema(_StrictBase):
    tokens: dict[str, list[str]]


class RenderingSchema(_StrictBase):
    extensions: list[str]
    strict_checklist: bool


class EntriesSchema(_StrictBase):
    identifiers: IdentifiersSchema
    pagination: PaginationSchema
    classification: ClassificationSchema
    rendering: RenderingSchema
