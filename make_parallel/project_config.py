"""
JSON-based project configuration for make_parallel.

Allows overriding built-in constants (``make_parallel.config``) through:
1. An explicit config file path (CLI ``--config``)
2. .make_parallel.json next to the model snapshot
3. .make_parallel.json in the current directory
4. ~/.make_parallel.json

Example .make_parallel.json:
{
    "calculator": {
        "parallel_tolerance_rad": 0.001,
        "parallel_check_tolerance_deg": 0.1
    },
    "extraction": {
        "mep_categories": ["OST_PipeCurves", "OST_DuctCurves"]
    },
    "logging": {
        "level": "DEBUG",
        "json_file": "make_parallel.log.json"
    }
}
"""

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from make_parallel import config as cfg
from make_parallel.model.categories import BuiltInCategory

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".make_parallel.json"


@dataclass
class CalculatorConfig:
    """Rotation calculation tolerances."""
    parallel_tolerance_rad: float = 0.001
    parallel_check_tolerance_deg: float = 0.1


@dataclass
class ExtractionConfig:
    """Direction extraction settings."""
    mep_categories: List[str] = field(default_factory=lambda: list(cfg.MEP_CATEGORY_NAMES))
    curve_midpoint_parameter: float = 0.5


@dataclass
class LoggingConfig:
    level: str = "INFO"
    json_file: Optional[str] = None
    use_colors: bool = True


_SECTIONS = ("calculator", "extraction", "logging")


@dataclass
class ProjectConfig:
    """Complete project configuration."""
    calculator: CalculatorConfig = field(default_factory=CalculatorConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def save(self, path: Union[str, Path]) -> None:
        """Write the configuration as JSON."""
        path = Path(path)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(self.to_json())
        logger.info("Configuration saved to %s", path)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProjectConfig':
        """Build a configuration; unknown sections and keys are ignored.

        Raises:
            ValueError: if a listed MEP category name is unknown
        """
        config = cls()
        for section_name in _SECTIONS:
            section = getattr(config, section_name)
            for key, value in data.get(section_name, {}).items():
                if hasattr(section, key):
                    setattr(section, key, value)
                else:
                    logger.debug("Ignoring unknown config key %s.%s", section_name, key)

        unknown = [n for n in config.extraction.mep_categories if n not in BuiltInCategory.__members__]
        if unknown:
            raise ValueError(f"Unknown MEP categories in config: {', '.join(unknown)}")
        return config

    @classmethod
    def from_json(cls, json_str: str) -> 'ProjectConfig':
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'ProjectConfig':
        """Load a configuration file.

        Raises:
            FileNotFoundError: If file doesn't exist
            json.JSONDecodeError: If file is not valid JSON
        """
        path = Path(path)
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        logger.info("Configuration loaded from %s", path)
        return cls.from_dict(data)

    @property
    def log_level(self) -> int:
        level = logging.getLevelName(self.logging.level.upper())
        return level if isinstance(level, int) else logging.INFO


def find_config_file(
    model_path: Optional[Union[str, Path]] = None,
    explicit_config: Optional[Union[str, Path]] = None,
) -> Optional[Path]:
    """Find a configuration file.

    Search order: explicit path, the model's directory, the current
    directory, the user's home directory.
    """
    if explicit_config:
        explicit = Path(explicit_config)
        if explicit.exists():
            return explicit
        logger.warning("Explicit config not found: %s", explicit)

    candidates = []
    if model_path:
        candidates.append(Path(model_path).parent / CONFIG_FILENAME)
    candidates.append(Path.cwd() / CONFIG_FILENAME)
    candidates.append(Path.home() / CONFIG_FILENAME)

    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None


def load_config(
    model_path: Optional[Union[str, Path]] = None,
    explicit_config: Optional[Union[str, Path]] = None,
) -> ProjectConfig:
    """Load the configuration found by ``find_config_file``, else defaults."""
    config_path = find_config_file(model_path, explicit_config)
    if config_path:
        try:
            return ProjectConfig.load(config_path)
        except (json.JSONDecodeError, OSError, ValueError) as e:
            logger.error("Failed to load config %s: %s", config_path, e)
    return ProjectConfig()


def merge_configs(base: ProjectConfig, override: ProjectConfig) -> ProjectConfig:
    """Apply every non-default value of ``override`` on top of ``base``."""
    merged = ProjectConfig.from_dict(base.to_dict())
    defaults = ProjectConfig()
    for section_name in _SECTIONS:
        override_section = getattr(override, section_name)
        default_section = getattr(defaults, section_name)
        merged_section = getattr(merged, section_name)
        for f in fields(override_section):
            value = getattr(override_section, f.name)
            if value != getattr(default_section, f.name):
                setattr(merged_section, f.name, value)
    return merged


def apply_config_to_globals(config: ProjectConfig) -> None:
    """Write the configuration into ``make_parallel.config`` in place."""
    cfg.PARALLEL_TOLERANCE_RAD = float(config.calculator.parallel_tolerance_rad)
    cfg.PARALLEL_CHECK_TOLERANCE_DEG = float(config.calculator.parallel_check_tolerance_deg)
    cfg.MEP_CATEGORY_NAMES = tuple(config.extraction.mep_categories)
    cfg.CURVE_MIDPOINT_PARAMETER = float(config.extraction.curve_midpoint_parameter)
    logger.debug("Applied project config to global constants")


def create_sample_config(path: Union[str, Path] = CONFIG_FILENAME) -> None:
    """Write a documented sample configuration file."""
    sample = {
        "_comment": "make_parallel configuration",
        "_version": "1.0",
        "calculator": {
            "_comment": "Angles below parallel_tolerance_rad are treated as parallel",
            **asdict(CalculatorConfig()),
        },
        "extraction": {
            "_comment": "Categories whose curve elements use MEP direction extraction",
            **asdict(ExtractionConfig()),
        },
        "logging": asdict(LoggingConfig()),
    }

    path = Path(path)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(sample, f, indent=2, ensure_ascii=False)
    logger.info("Sample configuration created: %s", path)
