"""
Engine Configuration System

Provides YAML-based configuration loading for turbine engine constants,
thrust tables and engine setup.
"""

import logging
from pathlib import Path
from typing import Dict, Any, Optional

import yaml

from ..core.constants import EngineConstants, AugMethod, ConfigurationError
from ..core.curves import ThrustCurve, ConstantCurve, TableCurve, EngineCurves
from ..core.turbine import TurbineEngine

logger = logging.getLogger(__name__)

NEWTONS_TO_LBF = 0.224809

REQUIRED_FIELDS = ('milthrust', 'tsfc', 'idlen1', 'idlen2', 'maxn1', 'maxn2')

# YAML key -> EngineConstants field
LIMIT_FIELDS = {
    'egt': 'egt_limit_degc',
    'stall-margin': 'stall_margin',
    'stall-time': 'stall_time',
    'fire-delay': 'fire_delay',
    'seize-delay': 'seize_delay',
    'reverse-thrust-ratio': 'reverse_thrust_ratio',
}

TABLE_NAMES = ('idle_thrust', 'mil_thrust', 'aug_thrust', 'injection')


def _number(section: Dict[str, Any], key: str, default: float = 0.0) -> float:
    """Numeric field of a config section; a missing or null value gives the default."""
    value = section.get(key)
    if value is None:
        return float(default)
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{key} must be a number, got {value!r}") from exc


class EngineConfig:
    """
    Engine configuration loaded from YAML file.

    Attributes
    ----------
    name : str
        Engine name
    units : str
        Thrust units in the file ('LBS' or 'N')
    constants : EngineConstants
        Validated engine constants (thrust always in lbf)
    curves : EngineCurves
        Thrust lookup curves
    """

    def __init__(self, config_dict: Dict[str, Any], base_dir: Optional[str] = None):
        """
        Initialize engine configuration from dictionary.

        Parameters
        ----------
        config_dict : dict
            Configuration dictionary (typically from YAML)
        base_dir : str, optional
            Directory that relative table CSV paths are resolved against
        """
        if not isinstance(config_dict, dict) or 'engine' not in config_dict:
            raise ConfigurationError("Configuration must contain an 'engine' section")
        self.raw_config = config_dict
        self.base_dir = Path(base_dir) if base_dir else Path.cwd()
        self._parse_config()

    def _parse_config(self):
        """Parse configuration dictionary."""
        engine = self.raw_config['engine']

        self.name = engine.get('name', 'turbine')
        self.units = str(engine.get('units', 'LBS')).upper()
        if self.units not in ('LBS', 'N'):
            raise ConfigurationError(f"Unknown thrust units: {self.units}")

        augmented = bool(engine.get('augmented', False))
        injected = bool(engine.get('injected', False))

        required = list(REQUIRED_FIELDS)
        if augmented:
            required += ['maxthrust', 'atsfc']
        if injected:
            required.append('injection-time')
        missing = [key for key in required if engine.get(key) is None]
        if missing:
            raise ConfigurationError(
                f"Engine '{self.name}' is missing required fields: {', '.join(missing)}")

        scale = NEWTONS_TO_LBF if self.units == 'N' else 1.0

        values = {
            'mil_thrust': _number(engine, 'milthrust') * scale,
            'max_thrust': _number(engine, 'maxthrust') * scale,
            'bypass_ratio': _number(engine, 'bypassratio'),
            'bleed': _number(engine, 'bleed'),
            'tsfc': _number(engine, 'tsfc'),
            'atsfc': _number(engine, 'atsfc'),
            'idle_n1': _number(engine, 'idlen1'),
            'idle_n2': _number(engine, 'idlen2'),
            'max_n1': _number(engine, 'maxn1'),
            'max_n2': _number(engine, 'maxn2'),
            'augmented': augmented,
            'aug_method': int(_number(engine, 'augmethod', AugMethod.PROPERTY.value)),
            'injected': injected,
            'injection_time': _number(engine, 'injection-time'),
        }
        spinup = engine.get('spinup', {}) or {}
        for key in spinup:
            if key not in ('n1', 'n2'):
                raise ConfigurationError(f"Unknown spin-up rate: {key}")
            if spinup[key] is not None:
                values[f"{key}_spinup"] = _number(spinup, key)

        # Limits
        limits = engine.get('limits', {}) or {}
        for key in limits:
            if key not in LIMIT_FIELDS:
                raise ConfigurationError(f"Unknown limit: {key}")
            if limits[key] is not None:
                values[LIMIT_FIELDS[key]] = _number(limits, key)

        self.constants = EngineConstants(**values)

        # Thrust tables
        self.tables = engine.get('tables', {}) or {}
        self.curves = self._parse_curves(self.tables)

        logger.debug(f"Parsed engine '{self.name}': {self.constants}")

    def _parse_curves(self, tables: Dict[str, Any]) -> EngineCurves:
        curves = EngineCurves.defaults()
        for name, table in tables.items():
            if name not in TABLE_NAMES:
                raise ConfigurationError(f"Unknown table: {name}")
            setattr(curves, name, self._parse_curve(name, table))
        return curves

    def _parse_curve(self, name: str, table) -> ThrustCurve:
        if isinstance(table, (int, float)):
            return ConstantCurve(table)
        if not isinstance(table, dict):
            raise ConfigurationError(f"Table '{name}' must be a number or a mapping")

        if 'csv' in table:
            csv_file = self.base_dir / table['csv']
            if not csv_file.exists():
                raise ConfigurationError(f"Table file not found: {csv_file}")
            return TableCurve.from_csv(str(csv_file), name=name)

        try:
            return TableCurve(table['mach'], table['altitude'], table['data'], name=name)
        except KeyError as exc:
            raise ConfigurationError(f"Table '{name}' is missing {exc}") from exc
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc

    def create_engine(self, **kwargs) -> TurbineEngine:
        """
        Create a TurbineEngine from configuration.

        Parameters
        ----------
        **kwargs
            Passed through to TurbineEngine (fuel_supply, observers,
            engine_number, running, conditions)

        Returns
        -------
        TurbineEngine
            Configured engine
        """
        kwargs.setdefault('name', self.name)
        return TurbineEngine(self.constants, curves=self.curves, **kwargs)

    def __repr__(self):
        """String representation."""
        return (f"EngineConfig(name='{self.name}', "
                f"mil_thrust={self.constants.mil_thrust:.1f} lbf, "
                f"augmented={self.constants.augmented}, "
                f"units='{self.units}')")


def load_engine_config(yaml_file: str) -> EngineConfig:
    """
    Load engine configuration from YAML file.

    Parameters
    ----------
    yaml_file : str
        Path to YAML configuration file

    Returns
    -------
    EngineConfig
        Loaded engine configuration

    Examples
    --------
    >>> config = load_engine_config('config/j79.yaml')
    >>> engine = config.create_engine(running=True)
    """
    with open(yaml_file, 'r') as f:
        config_dict = yaml.safe_load(f)

    return EngineConfig(config_dict, base_dir=str(Path(yaml_file).parent))


def save_engine_config(config: EngineConfig, yaml_file: str):
    """
    Save engine configuration to YAML file.

    Parameters
    ----------
    config : EngineConfig
        Engine configuration to save
    yaml_file : str
        Output YAML file path
    """
    with open(yaml_file, 'w') as f:
        yaml.dump(config.raw_config, f, default_flow_style=False, sort_keys=False)

    logger.info(f"Configuration saved to: {yaml_file}")


def create_example_config() -> Dict[str, Any]:
    """
    Create example engine configuration dictionary.

    Returns
    -------
    dict
        Example configuration (afterburning turbojet)
    """
    config = {
        'engine': {
            'name': 'J79',
            'units': 'LBS',
            'milthrust': 10900.0,   # lbf
            'maxthrust': 16500.0,   # lbf
            'bypassratio': 0.0,
            'bleed': 0.03,
            'tsfc': 0.88,           # lbm/hr/lbf
            'atsfc': 1.91,
            'idlen1': 30.0,         # %
            'idlen2': 60.0,
            'maxn1': 100.0,
            'maxn2': 100.0,
            'augmented': True,
            'augmethod': 1,         # 0 property, 1 throttle, 2 extended range
            'injected': False,
            'limits': {
                'egt': 850.0,       # deg C
                'stall-margin': 35.0,
                'stall-time': 2.0,
                'fire-delay': 5.0,
                'seize-delay': 10.0,
                'reverse-thrust-ratio': 0.5
            },
            'tables': {
                'injection': 1.2
            }
        }
    }

    return config
