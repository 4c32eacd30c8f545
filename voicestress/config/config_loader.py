"""Configuration loader for VoiceStress"""

import yaml
from pathlib import Path
from typing import Any, Dict
import os


# Config shipped with the repository, used when the working directory has none
PACKAGED_CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"


class Config:
    """Configuration manager for VoiceStress"""

    def __init__(self, config_path: str = None):
        if config_path is None:
            config_path = str(self._resolve_default_path())

        self.config_path = Path(config_path)
        self._config = self._load_config()

    @staticmethod
    def _resolve_default_path() -> Path:
        env = os.getenv('VOICESTRESS_ENV', 'development')
        for config_dir in (Path("config"), PACKAGED_CONFIG_DIR):
            # Try environment-specific config first, fall back to default
            env_config = config_dir / f"config.{env}.yaml"
            if env_config.exists():
                return env_config
            default_config = config_dir / "config.yaml"
            if default_config.exists():
                return default_config
        return Path("config/config.yaml")

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file"""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        with open(self.config_path, 'r') as f:
            return yaml.safe_load(f) or {}

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation

        Args:
            key: Configuration key in dot notation (e.g., 'aggregation.min_frames')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default

        return value if value is not None else default

    def __getitem__(self, key: str) -> Any:
        """Allow dictionary-style access"""
        return self.get(key)

    def validate(self) -> None:
        """Validate configuration values"""
        energy_floor = self.get('aggregation.energy_floor')
        if energy_floor is not None and energy_floor < 0:
            raise ValueError(f"Invalid energy_floor: {energy_floor}, must be >= 0")

        min_frames = self.get('aggregation.min_frames')
        if min_frames is not None and min_frames < 1:
            raise ValueError(f"Invalid min_frames: {min_frames}, must be >= 1")

        required_takes = self.get('calibration.required_takes')
        if required_takes is not None and required_takes < 1:
            raise ValueError(f"Invalid required_takes: {required_takes}, must be >= 1")

        backend = self.get('storage.backend', 'file')
        if backend not in ('memory', 'file', 'redis'):
            raise ValueError(f"Unknown storage backend: {backend}")
        if backend == 'redis' and not self.get('storage.redis_url'):
            raise ValueError("Redis URL not configured")


# Global config instance
config = Config()
