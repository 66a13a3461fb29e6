"""Configuration management using Pydantic."""

from pathlib import Path
from typing import Optional, Any, Literal
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

STORAGE_KINDS = ("production", "sqlite", "memory", "development")


class StorageConfig(BaseModel):
    """Configuration for storage."""
    kind: str = "production"  # "production"/"sqlite" persist, "memory"/"development" don't
    db_path: Path = Path("storage/notes.db")
    memory_namespace: str = "default"


class BindingConfig(BaseModel):
    """Configuration for the boundary adapter."""
    error_mode: Literal["null", "payload"] = "null"
    indent: Optional[int] = None


class SearchConfig(BaseModel):
    """Configuration for search."""
    limit: Optional[int] = Field(default=None, ge=1)


class Config(BaseSettings):
    """Main configuration class."""

    # Component configurations
    storage: StorageConfig = Field(default_factory=StorageConfig)
    binding: BindingConfig = Field(default_factory=BindingConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    # Development
    debug: bool = False

    model_config = SettingsConfigDict(
        env_prefix="STUDENTNOTES_",
        env_file=".env",
        env_nested_delimiter="__",
        case_sensitive=False
    )

    def model_post_init(self, __context: Any) -> None:
        """Post-initialization processing."""
        if self.debug:
            self.log_level = "DEBUG"

    @classmethod
    def load_from_file(cls, config_path: Path) -> "Config":
        """Load configuration from a file."""
        if config_path.suffix.lower() == '.json':
            import json
            with open(config_path) as f:
                data = json.load(f)
        elif config_path.suffix.lower() in ['.yaml', '.yml']:
            import yaml
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        else:
            raise ValueError(f"Unsupported config file format: {config_path.suffix}")

        return cls(**data)

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to a file."""
        config_path.parent.mkdir(parents=True, exist_ok=True)

        if config_path.suffix.lower() == '.json':
            import json
            with open(config_path, 'w') as f:
                json.dump(self.model_dump(mode="json"), f, indent=2)
        elif config_path.suffix.lower() in ['.yaml', '.yml']:
            import yaml
            with open(config_path, 'w') as f:
                yaml.dump(self.model_dump(mode="json"), f, default_flow_style=False)
        else:
            raise ValueError(f"Unsupported config file format: {config_path.suffix}")
