"""
Configuration Manager for Rotation Analysis

Loads the rotations to compare, the coverage policy and the analysis
settings from a JSON file, falling back to built-in defaults.
"""

import json
import logging
from datetime import date, datetime
from typing import Dict, List, Optional, Any
from pathlib import Path

from .analyzer import RotationConfig
from .staffing_solver import CoveragePolicy
from .weekend_classifier import WeekendPolicy

logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"


class ConfigError(Exception):
    """Base exception for ConfigManager operations"""
    pass


class ConfigFileNotFoundError(ConfigError):
    """Raised when an explicitly requested config file is missing"""
    pass


class ConfigFileCorruptedError(ConfigError):
    """Raised when the config file is not valid JSON"""
    pass


class ConfigValidationError(ConfigError):
    """Raised when config values have the wrong type or range"""
    pass


def rotation_from_dict(data: Dict[str, Any]) -> RotationConfig:
    return RotationConfig(
        work_days=data.get("workDays", 0),
        rest_days=data.get("restDays", 0),
        nights_per_cycle=data.get("nights", 0),
        name=data.get("name", ""),
        id=str(data.get("id", ""))
    )


def rotation_to_dict(rotation: RotationConfig) -> Dict[str, Any]:
    return {
        "id": rotation.id,
        "name": rotation.name,
        "workDays": rotation.work_days,
        "restDays": rotation.rest_days,
        "nights": rotation.nights_per_cycle
    }


class ConfigManager:
    """Loads and validates analysis configuration"""

    def __init__(self, config_file: Optional[str] = None, required: bool = False):
        self.config_file = Path(config_file) if config_file else None
        self.data = self._load_or_create_data(required)

    def _load_or_create_data(self, required: bool) -> Dict[str, Any]:
        """Load the config file or return defaults when there is none"""
        if self.config_file is None:
            return self._create_default_data()

        if not self.config_file.exists():
            if required:
                raise ConfigFileNotFoundError(f"Config file {self.config_file} does not exist")
            logger.info(f"No config file at {self.config_file}, using defaults")
            return self._create_default_data()

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error(f"Error loading config file {self.config_file}: {e}")
            raise ConfigFileCorruptedError(f"Config file {self.config_file} is not valid JSON: {e}")
        except IOError as e:
            raise ConfigError(f"Failed to read config file {self.config_file}: {e}")

        if not isinstance(data, dict):
            raise ConfigFileCorruptedError(f"Config file {self.config_file} must contain a JSON object")

        data = self._validate_and_migrate_data(data)
        logger.info(f"Loaded {len(data['rotations'])} rotations from {self.config_file}")
        return data

    def _create_default_data(self) -> Dict[str, Any]:
        """Default document: next year, three common rotations"""
        year = datetime.now().year + 1
        return {
            "settings": {
                "appVersion": APP_VERSION,
                "year": year,
                "startDate": f"{year}-01-01",
                "weekendPolicy": WeekendPolicy.INCLUDE_TRANSITIONAL.value
            },
            "coverage": {
                "dayPosts": 12,
                "nightPosts": 4,
                "guardPosts": 0,
                "vacationShifts": 24,
                "backupFactor": 1.0
            },
            "rotations": [
                {"id": "1", "name": "Current (6-3)", "workDays": 6, "restDays": 3, "nights": 2},
                {"id": "2", "name": "Option A (5-3)", "workDays": 5, "restDays": 3, "nights": 2},
                {"id": "3", "name": "Option B (6-4)", "workDays": 6, "restDays": 4, "nights": 2}
            ]
        }

    def _validate_and_migrate_data(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Fill missing sections from defaults and check value types"""
        default_data = self._create_default_data()

        for key in default_data:
            if key not in data:
                data[key] = default_data[key]

        for section in ("settings", "coverage"):
            if not isinstance(data[section], dict):
                raise ConfigValidationError(f"Section '{section}' must be an object")
            for key, value in default_data[section].items():
                data[section].setdefault(key, value)

        if not isinstance(data["rotations"], list):
            raise ConfigValidationError("Section 'rotations' must be a list")

        # Older files named the night count "nightsPerCycle"
        for index, rotation in enumerate(data["rotations"]):
            if not isinstance(rotation, dict):
                raise ConfigValidationError(f"Rotation #{index + 1} must be an object")
            if "nights" not in rotation and "nightsPerCycle" in rotation:
                rotation["nights"] = rotation.pop("nightsPerCycle")
            rotation.setdefault("id", str(index + 1))
            for key in ("workDays", "restDays", "nights"):
                value = rotation.get(key, 0)
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise ConfigValidationError(
                        f"Rotation '{rotation.get('name', rotation['id'])}': {key} must be a number"
                    )
                if value < 0:
                    raise ConfigValidationError(
                        f"Rotation '{rotation.get('name', rotation['id'])}': {key} must not be negative"
                    )

        self._validate_coverage(data["coverage"])
        self._parse_date(data["settings"]["startDate"])
        self._parse_weekend_policy(data["settings"]["weekendPolicy"])
        if isinstance(data["settings"]["year"], bool) or not isinstance(data["settings"]["year"], int):
            raise ConfigValidationError("Setting 'year' must be an integer")

        return data

    def _validate_coverage(self, coverage: Dict[str, Any]):
        for key in ("dayPosts", "nightPosts", "guardPosts", "vacationShifts", "backupFactor"):
            value = coverage[key]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigValidationError(f"Coverage '{key}' must be a number")
            if value < 0:
                raise ConfigValidationError(f"Coverage '{key}' must not be negative")
        if coverage["backupFactor"] < 1:
            raise ConfigValidationError("Coverage 'backupFactor' must be at least 1.0")

    @staticmethod
    def _parse_date(value: Any) -> date:
        try:
            return datetime.strptime(str(value), "%Y-%m-%d").date()
        except ValueError as e:
            raise ConfigValidationError(f"Invalid start date '{value}': {e}")

    @staticmethod
    def _parse_weekend_policy(value: Any) -> WeekendPolicy:
        try:
            return WeekendPolicy(value)
        except ValueError:
            valid = ", ".join(p.value for p in WeekendPolicy)
            raise ConfigValidationError(f"Unknown weekend policy '{value}', expected one of: {valid}")

    # Settings
    def get_setting(self, key: str, default=None):
        """Get application setting"""
        return self.data.get("settings", {}).get(key, default)

    def set_setting(self, key: str, value):
        """Set application setting (in memory only)"""
        self.data.setdefault("settings", {})[key] = value

    def get_year(self) -> int:
        return self.data["settings"]["year"]

    def get_start_date(self) -> date:
        return self._parse_date(self.data["settings"]["startDate"])

    def get_weekend_policy(self) -> WeekendPolicy:
        return self._parse_weekend_policy(self.data["settings"]["weekendPolicy"])

    def get_coverage_policy(self) -> CoveragePolicy:
        coverage = self.data["coverage"]
        return CoveragePolicy(
            day_posts=coverage["dayPosts"],
            night_posts=coverage["nightPosts"],
            guard_posts=coverage["guardPosts"],
            vacation_shifts=coverage["vacationShifts"],
            backup_factor=coverage["backupFactor"]
        )

    # Rotations
    def get_rotations(self) -> List[RotationConfig]:
        return [rotation_from_dict(r) for r in self.data.get("rotations", [])]

    def add_rotation(self, work_days: int, rest_days: int, nights: int = 0,
                     name: str = "") -> RotationConfig:
        """Add a rotation with the next free numeric id"""
        rotations = self.data.setdefault("rotations", [])
        numeric_ids = [int(r["id"]) for r in rotations if str(r.get("id", "")).isdigit()]
        new_id = str(max(numeric_ids, default=0) + 1)

        rotation = RotationConfig(
            work_days=work_days,
            rest_days=rest_days,
            nights_per_cycle=nights,
            name=name or f"New {len(rotations) + 1}",
            id=new_id
        )
        rotations.append(rotation_to_dict(rotation))
        return rotation

    def remove_rotation(self, rotation_id: str) -> bool:
        rotations = self.data.get("rotations", [])
        remaining = [r for r in rotations if str(r.get("id")) != str(rotation_id)]
        if len(remaining) == len(rotations):
            return False
        self.data["rotations"] = remaining
        return True
