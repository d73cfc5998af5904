"""Scenario configuration and policy registry."""

from fairvalue.scenarios.config import SCENARIO_PRESETS
from fairvalue.scenarios.config import ScenarioConfig
from fairvalue.scenarios.registry import create_policies
from fairvalue.scenarios.registry import list_policies
from fairvalue.scenarios.registry import POLICY_REGISTRY

__all__ = [
  'ScenarioConfig',
  'SCENARIO_PRESETS',
  'POLICY_REGISTRY',
  'create_policies',
  'list_policies',
]
