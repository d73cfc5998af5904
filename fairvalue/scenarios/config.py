"""
Scenario configuration for valuation runs.

ScenarioConfig is a serializable (JSON-friendly) configuration class that
specifies which policies to use for each component of the valuation.
"""

from dataclasses import asdict
from dataclasses import dataclass
import json
from typing import Any


@dataclass
class ScenarioConfig:
  """
  Configuration for a valuation scenario.

  Policy fields are strings that map to factories in the registry, which
  keeps the config serializable for reproducibility.

  Attributes:
    name: Human-readable scenario name
    paths: Assumption path policy name ('zero_pad' or 'strict')
    reinvestment: Reinvestment policy name (e.g., 'base_ratio')
    projection_years: Horizon used when a stored case omits one
  """
  name: str = 'default'
  paths: str = 'zero_pad'
  reinvestment: str = 'base_ratio'
  projection_years: int = 5

  @classmethod
  def default(cls) -> 'ScenarioConfig':
    """
    Create default scenario configuration.

    Uses:
      - Zero-padded growth and margin arrays
      - Base-year revenue ratios for D&A, capex and NWC
      - 5-year horizon for cases that omit one
    """
    return cls(
        name='default',
        paths='zero_pad',
        reinvestment='base_ratio',
        projection_years=5,
    )

  @classmethod
  def strict(cls) -> 'ScenarioConfig':
    """Scenario that rejects growth or margin arrays of the wrong length."""
    return cls(
        name='strict',
        paths='strict',
        reinvestment='base_ratio',
        projection_years=5,
    )

  def to_dict(self) -> dict[str, Any]:
    """Convert to dictionary."""
    return asdict(self)

  def to_json(self) -> str:
    """Serialize to JSON string."""
    return json.dumps(self.to_dict(), indent=2)

  @classmethod
  def from_dict(cls, data: dict[str, Any]) -> 'ScenarioConfig':
    """Create from dictionary."""
    return cls(**data)

  @classmethod
  def from_json(cls, json_str: str) -> 'ScenarioConfig':
    """Create from JSON string."""
    return cls.from_dict(json.loads(json_str))


SCENARIO_PRESETS = {
    'default': ScenarioConfig.default,
    'strict': ScenarioConfig.strict,
}
