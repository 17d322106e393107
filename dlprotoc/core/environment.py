"""
Build environment adapter.

The build system hands us an output directory through an environment variable
and reads the installed protoc location back from another one. All access to
process-global environment state goes through a BuildEnvironment so the
installer can be driven with explicit values in tests.
"""

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import MutableMapping, Optional

from dlprotoc.core.exceptions import BuildEnvironmentError

logger = logging.getLogger(__name__)

# Build output directory set by the calling build system
DEFAULT_OUT_DIR_ENV_VAR = "OUT_DIR"

# Variable code generators (grpcio-tools wrappers, prost-build, ...) read to find protoc
DEFAULT_PROTOC_ENV_VAR = "PROTOC"


class BuildEnvironment(ABC):
    """Where the build output directory comes from and where protoc goes."""

    @abstractmethod
    def get_output_dir(self) -> Path:
        """
        Return the build output directory.

        Raises:
            BuildEnvironmentError: If the build system did not provide one
        """
        pass

    @abstractmethod
    def set_tool_path(self, path: Path) -> None:
        """Publish the installed protoc executable to the build."""
        pass


class ProcessBuildEnvironment(BuildEnvironment):
    """
    BuildEnvironment backed by environment variables.

    Example:
        >>> env = ProcessBuildEnvironment()
        >>> env.get_output_dir()
        PosixPath('/build/out')
    """

    def __init__(
        self,
        out_dir_env_var: str = DEFAULT_OUT_DIR_ENV_VAR,
        protoc_env_var: str = DEFAULT_PROTOC_ENV_VAR,
        environ: Optional[MutableMapping[str, str]] = None,
    ):
        self.out_dir_env_var = out_dir_env_var
        self.protoc_env_var = protoc_env_var
        self.environ = os.environ if environ is None else environ

    def get_output_dir(self) -> Path:
        value = self.environ.get(self.out_dir_env_var)
        if not value:
            raise BuildEnvironmentError(
                f"env var {self.out_dir_env_var}: not set; "
                "dlprotoc must be run from a build that provides an output directory"
            )
        return Path(value)

    def set_tool_path(self, path: Path) -> None:
        logger.debug(f"Setting {self.protoc_env_var}={path}")
        self.environ[self.protoc_env_var] = str(path)


class StaticBuildEnvironment(BuildEnvironment):
    """BuildEnvironment with an explicit output directory, recording the tool path."""

    def __init__(self, output_dir: Optional[Path]):
        self.output_dir = Path(output_dir) if output_dir is not None else None
        self.tool_path: Optional[Path] = None

    def get_output_dir(self) -> Path:
        if self.output_dir is None:
            raise BuildEnvironmentError("no build output directory configured")
        return self.output_dir

    def set_tool_path(self, path: Path) -> None:
        self.tool_path = Path(path)


__all__ = [
    "DEFAULT_OUT_DIR_ENV_VAR",
    "DEFAULT_PROTOC_ENV_VAR",
    "BuildEnvironment",
    "ProcessBuildEnvironment",
    "StaticBuildEnvironment",
]
