"""
ProfileRegistry: loads config/security_profiles.yaml and exposes the
named hashing policies (security levels and use cases).
"""

import pathlib
from typing import Any, Dict, List

import yaml

from config.settings import config
from utils.errors import UnknownProfileError
from utils.schemas import HashOptions, SecurityProfile

FALLBACK_LEVEL = "medium"


class ProfileRegistry:
    def __init__(self, profiles_path: str | None = None):
        if not profiles_path:
            profiles_path = config.profiles_file or str(
                pathlib.Path(__file__).parent / "security_profiles.yaml"
            )
        with open(profiles_path, "r", encoding="utf-8") as fh:
            raw: Dict[str, Any] = yaml.safe_load(fh) or {}

        self.security_levels: Dict[str, SecurityProfile] = {
            name: SecurityProfile(name=name, **info)
            for name, info in (raw.get("security_levels") or {}).items()
        }
        self.use_cases: Dict[str, SecurityProfile] = {
            name: SecurityProfile(name=name, **info)
            for name, info in (raw.get("use_cases") or {}).items()
        }

    def get_security_level(self, name: str) -> SecurityProfile:
        if name not in self.security_levels:
            raise UnknownProfileError(
                f"Invalid security level: {name}", constraint="unknown"
            )
        return self.security_levels[name]

    def get_use_case_profile(self, name: str) -> SecurityProfile:
        """Unknown use cases fall back to the ``medium`` security level."""
        if name in self.use_cases:
            return self.use_cases[name]
        return self.get_security_level(FALLBACK_LEVEL)

    def get_profile(self, name: str) -> HashOptions:
        """Look up ``name`` among security levels, then use cases."""
        if name in self.security_levels:
            return self.security_levels[name].to_options()
        if name in self.use_cases:
            return self.use_cases[name].to_options()
        raise UnknownProfileError(f"Unknown profile: {name}", constraint="unknown")

    def list_profiles(self) -> List[str]:
        return list(self.security_levels) + list(self.use_cases)


_registry: ProfileRegistry | None = None


def get_profile_registry() -> ProfileRegistry:
    global _registry
    if _registry is None:
        _registry = ProfileRegistry()
    return _registry


def get_profile(name: str) -> HashOptions:
    return get_profile_registry().get_profile(name)
