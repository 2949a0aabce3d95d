# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Decoder configuration

Copyright 2025 DNAi inc.
"""

import os
from typing import Mapping, Optional

ENV_LOG_LEVEL = "IMGMETA_LOG_LEVEL"
ENV_MAX_IFD_CHAIN = "IMGMETA_MAX_IFD_CHAIN"


class DecoderConfig:
    """
    Limits and settings shared by every decoder.

    The decoders never mutate a config, so one instance can be shared
    between concurrent decodes.
    """

    def __init__(self, max_ifd_chain: int = 1024, log_level: str = "WARNING"):
        """
        Initialize with default settings.

        Args:
            max_ifd_chain: Maximum number of IFDs followed in the main TIFF
                directory chain
            log_level: Level name used by the command line entry point
        """
        if max_ifd_chain < 1:
            raise ValueError("max_ifd_chain must be at least 1")
        self.max_ifd_chain = max_ifd_chain
        self.log_level = log_level.upper()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DecoderConfig":
        """
        Build a config from IMGMETA_* environment variables.

        Args:
            environ: Mapping to read instead of os.environ

        Returns:
            DecoderConfig with defaults for anything not set
        """
        if environ is None:
            environ = os.environ

        kwargs = {}
        if environ.get(ENV_LOG_LEVEL):
            kwargs['log_level'] = environ[ENV_LOG_LEVEL]
        if environ.get(ENV_MAX_IFD_CHAIN):
            try:
                kwargs['max_ifd_chain'] = int(environ[ENV_MAX_IFD_CHAIN])
            except ValueError:
                raise ValueError(
                    f"{ENV_MAX_IFD_CHAIN} must be an integer, got {environ[ENV_MAX_IFD_CHAIN]!r}"
                )
        return cls(**kwargs)

    def __repr__(self) -> str:
        return f"DecoderConfig(max_ifd_chain={self.max_ifd_chain}, log_level={self.log_level!r})"


DEFAULT_CONFIG = DecoderConfig()
