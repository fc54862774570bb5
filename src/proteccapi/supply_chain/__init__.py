"""Supply-chain heuristics for installed dependencies."""

from proteccapi.supply_chain.heuristics import (
    EnvUsageFlag,
    InspectionReport,
    LifecycleFlag,
    SuspicionRecord,
    SuspiciousCodeFlag,
    check_lifecycle_scripts,
    check_typosquatting,
    inspect,
    levenshtein_distance,
)
from proteccapi.supply_chain.packages import PackageDescriptor, gather_packages

__all__ = [
    "EnvUsageFlag",
    "InspectionReport",
    "LifecycleFlag",
    "PackageDescriptor",
    "SuspicionRecord",
    "SuspiciousCodeFlag",
    "check_lifecycle_scripts",
    "check_typosquatting",
    "gather_packages",
    "inspect",
    "levenshtein_distance",
]
