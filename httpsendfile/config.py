"""
Configuration Management

Handles loading configuration from environment variables and config files.
"""

import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import List, Optional
import json

from dotenv import load_dotenv

from .transfer.policy import TransferPolicy, DEFAULT_CHUNK_BYTES, DEFAULT_DELAY_SECONDS


@dataclass
class Config:
    """
    Send file server configuration.

    Configuration priority (highest to lowest):
    1. Environment variables (SENDFILE_*)
    2. Config file (config.json)
    3. Default values
    """
    # Network
    host: str = '0.0.0.0'
    port: int = 8080

    # Files served by the bundled web app
    root_dir: Path = field(default_factory=lambda: Path('./shared'))

    # Throttle
    chunk_bytes: int = DEFAULT_CHUNK_BYTES
    delay_seconds: float = DEFAULT_DELAY_SECONDS

    # Response
    content_type: Optional[str] = None
    with_disposition: bool = True
    cors_origins: List[str] = field(default_factory=list)

    # Logging
    log_level: str = 'INFO'

    @classmethod
    def from_env(cls) -> 'Config':
        """Load configuration from environment variables."""
        load_dotenv()

        config = cls()

        # Network
        config.host = os.getenv('SENDFILE_HOST', config.host)
        config.port = int(os.getenv('SENDFILE_PORT', config.port))

        root_dir = os.getenv('SENDFILE_ROOT_DIR')
        if root_dir:
            config.root_dir = Path(root_dir)

        # Throttle
        config.chunk_bytes = int(os.getenv('SENDFILE_CHUNK_BYTES', config.chunk_bytes))
        config.delay_seconds = float(os.getenv('SENDFILE_DELAY_SECONDS', config.delay_seconds))

        # Response
        config.content_type = os.getenv('SENDFILE_CONTENT_TYPE') or None
        config.with_disposition = os.getenv('SENDFILE_WITH_DISPOSITION', 'true').lower() == 'true'

        origins = os.getenv('SENDFILE_CORS_ORIGINS', '')
        if origins:
            config.cors_origins = [o.strip() for o in origins.split(',') if o.strip()]

        # Logging
        config.log_level = os.getenv('SENDFILE_LOG_LEVEL', config.log_level)

        return config

    @classmethod
    def from_file(cls, path: Path) -> 'Config':
        """Load configuration from a JSON file."""
        if not path.exists():
            return cls()

        with open(path) as f:
            data = json.load(f)

        config = cls()

        # Network
        config.host = data.get('host', config.host)
        config.port = data.get('port', config.port)

        if 'root_dir' in data:
            config.root_dir = Path(data['root_dir'])

        # Throttle
        config.chunk_bytes = data.get('chunk_bytes', config.chunk_bytes)
        config.delay_seconds = data.get('delay_seconds', config.delay_seconds)

        # Response
        config.content_type = data.get('content_type', config.content_type)
        config.with_disposition = data.get('with_disposition', config.with_disposition)
        config.cors_origins = list(data.get('cors_origins', config.cors_origins))

        # Logging
        config.log_level = data.get('log_level', config.log_level)

        return config

    def policy(self) -> TransferPolicy:
        """Transfer policy for streamers built from this config."""
        return TransferPolicy(
            chunk_bytes=self.chunk_bytes,
            delay_seconds=self.delay_seconds,
            content_type=self.content_type,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'host': self.host,
            'port': self.port,
            'root_dir': str(self.root_dir),
            'chunk_bytes': self.chunk_bytes,
            'delay_seconds': self.delay_seconds,
            'content_type': self.content_type,
            'with_disposition': self.with_disposition,
            'cors_origins': list(self.cors_origins),
            'log_level': self.log_level,
        }

    def save(self, path: Path):
        """Save configuration to a JSON file."""
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from file and environment.

    Environment variables override file settings.
    """
    # Start with defaults
    config = Config()

    # Load from file if provided
    if config_path and config_path.exists():
        config = Config.from_file(config_path)

    # Override with environment variables
    env_config = Config.from_env()

    # Merge (env takes precedence for non-default values)
    defaults = Config()
    for key in ['host', 'port', 'root_dir', 'chunk_bytes', 'delay_seconds',
                'content_type', 'with_disposition', 'cors_origins', 'log_level']:
        env_val = getattr(env_config, key)
        if env_val != getattr(defaults, key):
            setattr(config, key, env_val)

    return config


# Example config file template
EXAMPLE_CONFIG = """
{
  "host": "0.0.0.0",
  "port": 8080,
  "root_dir": "./shared",
  "chunk_bytes": 40960,
  "delay_seconds": 0.1,
  "content_type": null,
  "with_disposition": true,
  "cors_origins": ["http://localhost:3000"],
  "log_level": "INFO"
}
"""


if __name__ == "__main__":
    # Print example config
    print("Example configuration file (config.json):")
    print(EXAMPLE_CONFIG)
