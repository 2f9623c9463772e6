"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (REVIEWPLANE__SECTION__KEY)
3. Repo YAML (.reviewplane/config.yaml)
4. Global YAML (~/.config/reviewplane/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    REVIEWPLANE__<SECTION>__<KEY>=<VALUE>

Examples:
    REVIEWPLANE__LOGGING__LEVEL=DEBUG
    REVIEWPLANE__NAVIGATION__WRAP=false
    REVIEWPLANE__REVIEWER__MODEL=gpt-5.3-codex
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

DEFAULT_NOISE_FILES: tuple[str, ...] = (
    "pnpm-lock.yaml",
    "pnpm-lock.yml",
    "package-lock.json",
    "npm-shrinkwrap.json",
    "yarn.lock",
    "bun.lock",
    "bun.lockb",
    "Cargo.lock",
    "Gemfile.lock",
    "Pipfile.lock",
    "poetry.lock",
    "uv.lock",
    "pdm.lock",
    "composer.lock",
    "go.sum",
    "Gopkg.lock",
    "mix.lock",
    "pubspec.lock",
    "Podfile.lock",
    "Package.resolved",
    "packages.lock.json",
    "paket.lock",
    "gradle.lockfile",
    "deps.lock",
    "Chart.lock",
    "renv.lock",
    "conan.lock",
    "vcpkg-lock.json",
    "flake.lock",
    ".terraform.lock.hcl",
)


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        REVIEWPLANE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every navigation and coverage decision.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class NavigationConfig(BaseModel):
    """Change/comment navigation behavior.

    Env vars:
        REVIEWPLANE__NAVIGATION__WRAP: Wrap around at the ends of the review
    """

    wrap: bool = Field(
        default=True,
        description="Wrap to the first/last target instead of reporting exhaustion.",
    )


class ReviewerConfig(BaseModel):
    """External AI reviewer invocation.

    Env vars:
        REVIEWPLANE__REVIEWER__COMMAND: Reviewer CLI (codex, opencode, ...)
        REVIEWPLANE__REVIEWER__MODEL: Model passed to the reviewer CLI
        REVIEWPLANE__REVIEWER__REASONING_EFFORT: Reasoning effort hint (codex only)
        REVIEWPLANE__REVIEWER__TIMEOUT_SEC: Per-call timeout
    """

    command: str = Field(
        default="codex",
        description="Reviewer executable. 'codex' receives the prompt as an argument, "
        "anything else receives it on stdin via '<command> run --model <model>'.",
    )
    model: str = Field(
        default="gpt-5.3-codex",
        description="Model name passed to the reviewer CLI.",
    )
    reasoning_effort: str | None = Field(
        default="medium",
        description="Reasoning effort hint for codex. Empty disables the flag.",
    )
    timeout_sec: float = Field(
        default=600.0,
        description="Timeout for a single reviewer call. Applies separately to the follow-up.",
    )

    @field_validator("timeout_sec")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"timeout_sec must be positive, got {v}")
        return v


class ReviewDiffConfig(BaseModel):
    """Local diff review configuration.

    Env vars:
        REVIEWPLANE__REVIEW_DIFF__SKIP_NOISE_FILES: Drop lock files from local reviews
    """

    skip_noise_files: bool = Field(
        default=True,
        description="Skip common lock/noise files in local diff reviews.",
    )
    noise_files: list[str] = Field(
        default_factory=lambda: list(DEFAULT_NOISE_FILES),
        description="Basenames skipped when skip_noise_files is enabled.",
    )


class CommentsConfig(BaseModel):
    """Local comment persistence.

    Env vars:
        REVIEWPLANE__COMMENTS__FILE_NAME: Comments file name at the git root
    """

    file_name: str = Field(
        default="REVIEW_COMMENTS.md",
        description="File (relative to the git root) that stores local review comments.",
    )

    @field_validator("file_name")
    @classmethod
    def validate_file_name(cls, v: str) -> str:
        if not v or Path(v).is_absolute():
            raise ValueError(f"file_name must be a relative path, got {v!r}")
        return v


class ReviewPlaneConfig(BaseModel):
    """Root configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    navigation: NavigationConfig = Field(default_factory=NavigationConfig)
    reviewer: ReviewerConfig = Field(default_factory=ReviewerConfig)
    review_diff: ReviewDiffConfig = Field(default_factory=ReviewDiffConfig)
    comments: CommentsConfig = Field(default_factory=CommentsConfig)
