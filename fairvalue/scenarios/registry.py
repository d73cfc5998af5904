"""
Policy registry for mapping string names to policy factories.

This enables scenarios to be configured with string names (JSON friendly)
while still instantiating the correct policy classes.

To add a new policy:
1. Implement the policy class in the appropriate module
   (e.g., policies/reinvestment.py)
2. Add a factory here and register it in the matching dictionary

Example:
  PATH_POLICIES['zero_pad'] = ZeroPadPath
  REINVESTMENT_POLICIES['base_ratio'] = BaseYearRatio
"""

from collections.abc import Callable
from typing import Any, cast

from fairvalue.policies.paths import PathPolicy
from fairvalue.policies.paths import StrictPath
from fairvalue.policies.paths import ZeroPadPath
from fairvalue.policies.reinvestment import BaseYearRatio
from fairvalue.policies.reinvestment import ReinvestmentPolicy
from fairvalue.scenarios.config import ScenarioConfig

PATH_POLICIES: dict[str, Callable[[], PathPolicy]] = {
    'zero_pad': ZeroPadPath,
    'strict': StrictPath,
}

REINVESTMENT_POLICIES: dict[str, Callable[[], ReinvestmentPolicy]] = {
    'base_ratio': BaseYearRatio,
}

POLICY_REGISTRY = {
    'paths': PATH_POLICIES,
    'reinvestment': REINVESTMENT_POLICIES,
}


def create_policies(config: ScenarioConfig) -> dict[str, Any]:
  """
  Create policy instances from scenario configuration.

  Args:
    config: ScenarioConfig with policy names

  Returns:
    Dictionary with instantiated policy objects:
    - paths: PathPolicy
    - reinvestment: ReinvestmentPolicy

  Raises:
    KeyError: If a policy name is not found in the registry
  """
  try:
    paths_factory = PATH_POLICIES[config.paths]
  except KeyError as e:
    raise KeyError(f"Unknown paths policy: '{config.paths}'. "
                   f'Available: {list(PATH_POLICIES.keys())}') from e

  try:
    reinvestment_factory = REINVESTMENT_POLICIES[config.reinvestment]
  except KeyError as e:
    raise KeyError(f"Unknown reinvestment policy: '{config.reinvestment}'. "
                   f'Available: {list(REINVESTMENT_POLICIES.keys())}') from e

  return {
      'paths': paths_factory(),
      'reinvestment': reinvestment_factory(),
  }


def list_policies() -> dict[str, list[str]]:
  """
  List all available policies by category.

  Returns:
    Dictionary mapping category names to list of policy names
  """
  result: dict[str, list[str]] = {}
  for category, policies_dict in POLICY_REGISTRY.items():
    policy_dict = cast(dict[str, object], policies_dict)
    result[category] = list(policy_dict.keys())
  return result
