"""
Pydantic model for cache configuration.
Provides validation for cache names, directories and write settings.
"""

import os
import pickle
from pathlib import Path

from pathvalidate import ValidationError as FilenameValidationError
from pathvalidate import validate_filename
from pydantic import BaseModel, Field, field_validator

DEFAULT_CACHE_NAME = "default"
CACHE_FILE_EXTENSION = ".cache"
MIN_PICKLE_PROTOCOL = 2


def get_default_cache_dir() -> Path:
    """Resolves the app-local "Silk" directory that holds cache files by default."""
    override = os.getenv("SILK_CACHE_DIR")
    if override:
        return Path(override).expanduser()
    if os.name == "nt":
        base_dir = Path(os.getenv("LOCALAPPDATA", "~\\AppData\\Local"))
    else:
        base_dir = Path(os.getenv("XDG_CACHE_HOME", "~/.cache"))
    return base_dir.expanduser() / "Silk"


class CacheConfig(BaseModel):
    """A validated configuration for a single named cache."""

    cache_name: str = DEFAULT_CACHE_NAME
    cache_dir: Path = Field(default_factory=get_default_cache_dir)
    atomic_commit: bool = False
    pickle_protocol: int = pickle.HIGHEST_PROTOCOL

    class Config:
        """Pydantic model configuration."""

        validate_assignment = True
        str_strip_whitespace = True

    @field_validator("cache_name", mode="before")
    @classmethod
    def validate_cache_name(cls, v: str | None) -> str:
        """
        Falls back to the default name for blank input, case-folds the name, and
        ensures it can be used as a file name.
        """
        if v is None or not str(v).strip():
            return DEFAULT_CACHE_NAME
        name = str(v).strip().lower()
        try:
            validate_filename(name + CACHE_FILE_EXTENSION)
        except FilenameValidationError as e:
            raise ValueError(f"Cache name '{name}' is not a valid file name: {e}") from e
        return name

    @field_validator("cache_dir", mode="before")
    @classmethod
    def validate_cache_dir(cls, v: Path | str | None) -> Path:
        """Uses the default directory when none is given and expands '~'."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return get_default_cache_dir()
        return Path(v).expanduser()

    @field_validator("pickle_protocol")
    @classmethod
    def validate_pickle_protocol(cls, v: int) -> int:
        """Ensures the protocol is supported by the running interpreter."""
        if v < MIN_PICKLE_PROTOCOL or v > pickle.HIGHEST_PROTOCOL:
            raise ValueError(
                f"Pickle protocol must be between {MIN_PICKLE_PROTOCOL} and "
                f"{pickle.HIGHEST_PROTOCOL}."
            )
        return v

    @property
    def cache_file(self) -> Path:
        """The file this configuration addresses."""
        return self.cache_dir / f"{self.cache_name}{CACHE_FILE_EXTENSION}"

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        return set(cls.model_fields)
