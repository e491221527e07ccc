"""Service settings and the project configuration model."""

from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings

CONFIG_FILE_NAME = "mo.config.json"


class ConfigError(Exception):
    """Raised when the project configuration cannot be loaded or is invalid."""


class ServiceConfig(BaseSettings):
    """
    Defines the process-level settings, loaded from environment variables or
    a .env file.
    """

    # Interface the WebSocket server binds to.
    MO_HOST: str = "127.0.0.1"
    # Overrides the port from the project config when set.
    MO_PORT: int | None = None
    # Project root; defaults to the process working directory.
    MO_ROOT_DIR: Path | None = None
    MO_CONFIG_FILE: str = CONFIG_FILE_NAME
    # Seconds before a shell or git subprocess is killed. None waits forever.
    MO_COMMAND_TIMEOUT: float | None = None
    LOG_LEVEL: str = "INFO"

    class Config:
        """Pydantic configuration settings."""

        # Environment loading is handled explicitly in main.py via load_dotenv.
        extra = "ignore"

    @property
    def root_dir(self) -> Path:
        return (self.MO_ROOT_DIR or Path.cwd()).resolve()

    @property
    def config_path(self) -> Path:
        return self.root_dir / self.MO_CONFIG_FILE


DEFAULT_IGNORE_LIST = [
    "#summary",
    ".npmrc",
    ".git",
    "node_modules",
    "public",
    "scripts",
    ".eslintrc.cjs",
    "components.json",
    "src/components/ui",
    ".gitignore",
    "package-lock.json",
    "README.md",
    "tsconfig.json",
    "vite.config.ts",
    "yarn.lock",
    "tsconfig.app.json",
    "tsconfig.node.json",
    "postcss.config.js",
    ".DS_Store",
    ".vscode",
]

DEFAULT_SETTING = [
    "# Role",
    "You are a web development expert fluent in CSS, JavaScript, React and Tailwind. "
    "You pick the best tools for the job and avoid needless duplication and complexity.",
    "# Development guidelines",
]


class ProjectConfig(BaseModel):
    """
    The contents of mo.config.json.

    Field aliases are the on-disk key names. Keys this model does not know
    about are kept and written back unchanged.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    include_patterns: list[str] = Field(alias="includeList")
    ignore_patterns: list[str] = Field(default_factory=list, alias="ignoreList")
    git_enabled: bool = Field(default=False, alias="git")
    command_exec_enabled: bool = Field(default=False, alias="cmd")
    port: int = 3000
    agent_type: str | None = Field(default=None, alias="agentType")
    start_url: str | None = Field(default=None, alias="startUrl")
    setting: list[str] = Field(default_factory=list)
    app_id: str | None = Field(default=None, alias="appId")
    is_initialized: bool = Field(default=False, alias="isInitialized")

    @field_validator("include_patterns")
    @classmethod
    def _include_patterns_valid(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("includeList is required and must be a non-empty array")
        for pattern in value:
            if not pattern or PurePosixPath(pattern).is_absolute() or PureWindowsPath(pattern).is_absolute():
                raise ValueError(f"includeList patterns must be relative to the project root: {pattern!r}")
        return value

    @classmethod
    def default(cls) -> "ProjectConfig":
        return cls.model_validate(
            {
                "templates": {},
                "port": 3000,
                "isInitialized": True,
                "startUrl": "http://localhost:5173/",
                "agentType": "Enterprise internal system",
                "setting": list(DEFAULT_SETTING),
                "includeList": ["src/**/*.js", "src/**/*.ts"],
                "appId": "",
                "organizationId": 1,
                "ignoreList": list(DEFAULT_IGNORE_LIST),
            }
        )

    def to_file_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
