"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (FEATHERS_DOCS__SECTION__KEY)
3. YAML config file (--config PATH or ~/.config/feathers-docs/config.yaml)
4. Built-in defaults (this file)

Environment Variable Format:
    FEATHERS_DOCS__<SECTION>__<KEY>=<VALUE>

Examples:
    FEATHERS_DOCS__REPO__URL=https://github.com/feathersjs/feathers.git
    FEATHERS_DOCS__REPO__BRANCH=dove
    FEATHERS_DOCS__REPO__CACHE_DIR=/var/cache/feathers-docs
    FEATHERS_DOCS__LIMITS__TOP_K=10
    FEATHERS_DOCS__SERVER__TRANSPORT=http
    FEATHERS_DOCS__LOGGING__LEVEL=DEBUG
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from feathers_docs.config.constants import LIST_LIMIT_MAX, LIST_LIMIT_MIN, PORT_MAX, PORT_MIN

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

DEFAULT_CACHE_SUBDIR = Path(".cache") / "feathersjs-docs-mcp"


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v == "stderr":
            return v
        if v == "stdout":
            raise ValueError("stdout is reserved for the MCP stdio transport")
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        FEATHERS_DOCS__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class RepoConfig(BaseModel):
    """Source repository configuration.

    Env vars:
        FEATHERS_DOCS__REPO__URL: Git URL of the repository holding docs/
        FEATHERS_DOCS__REPO__BRANCH: Branch to mirror
        FEATHERS_DOCS__REPO__DEPTH: Fetch depth (0 = full history)
        FEATHERS_DOCS__REPO__CACHE_DIR: Root cache directory
    """

    url: str = Field(
        default="https://github.com/feathersjs/feathers.git",
        description="Git repository URL that contains the docs/ directory.",
    )
    branch: str = Field(
        default="dove",
        description="Branch to fetch and hard-reset to on every refresh.",
    )
    depth: int = Field(
        default=1,
        ge=0,
        description="Shallow clone/fetch depth. 0 fetches the full history.",
    )
    cache_dir: str | None = Field(
        default=None,
        description="Root cache directory. Default: ./.cache/feathersjs-docs-mcp",
    )

    @field_validator("url", "branch")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v.strip()

    @property
    def cache_path(self) -> Path:
        if self.cache_dir:
            return Path(self.cache_dir).expanduser().resolve()
        return (Path.cwd() / DEFAULT_CACHE_SUBDIR).resolve()

    @property
    def repo_dir(self) -> Path:
        """Local checkout path for the mirrored repository."""
        return self.cache_path / "feathers-repo"

    @property
    def docs_dir(self) -> Path:
        """Docs root (``<repo_dir>/docs``)."""
        return self.repo_dir / "docs"


class LimitsConfig(BaseModel):
    """Listing defaults.

    Env vars:
        FEATHERS_DOCS__LIMITS__TOP_K: Default page size for list_docs
    """

    top_k: int = Field(
        default=6,
        ge=LIST_LIMIT_MIN,
        le=LIST_LIMIT_MAX,
        description="Default page size used by list_docs when no limit is given.",
    )


class ServerConfig(BaseModel):
    """MCP server configuration.

    Env vars:
        FEATHERS_DOCS__SERVER__TRANSPORT: stdio or http
        FEATHERS_DOCS__SERVER__HOST: Bind address for http (default: 127.0.0.1)
        FEATHERS_DOCS__SERVER__PORT: Port for http (default: 8123)
        FEATHERS_DOCS__SERVER__ENDPOINT: MCP endpoint path for http
        FEATHERS_DOCS__SERVER__STATELESS: Stateless streamable HTTP mode
    """

    transport: Literal["stdio", "http"] = Field(
        default="stdio",
        description="MCP transport to start.",
    )
    host: str = Field(
        default="127.0.0.1",
        description="Bind address. Use 0.0.0.0 for network access (no auth layer).",
    )
    port: int = Field(default=8123, description="HTTP port.")
    endpoint: str = Field(default="/mcp", description="MCP endpoint path for http.")
    stateless: bool = Field(default=False, description="Run streamable HTTP statelessly.")

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not (PORT_MIN <= v <= PORT_MAX):
            raise ValueError(f"Port must be {PORT_MIN}-{PORT_MAX}, got {v}")
        return v

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith("/"):
            raise ValueError(f"Endpoint must start with '/', got {v!r}")
        return v


class DocsServerConfig(BaseModel):
    """Root configuration.

    All settings can be configured via:
    1. Environment variables: FEATHERS_DOCS__SECTION__KEY
    2. A YAML config file
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    repo: RepoConfig = Field(default_factory=RepoConfig)
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
