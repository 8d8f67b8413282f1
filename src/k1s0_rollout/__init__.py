"""k1s0 rollout library."""

from .actor import ActorIdResolver
from .bucketing import RAND_BASE, in_percentage
from .catalog import FeatureCatalog
from .config import RedisSection, RolloutConfig, load_config
from .exceptions import RolloutError, RolloutErrorCodes
from .groups import CallableGroup, GroupPredicate, GroupRegistry
from .keys import KeySchema
from .memory import InMemoryFeatureStore
from .models import FeatureState
from .redis_store import RedisFeatureStore
from .rollout import Rollout
from .store import AddMembers, DeleteKeys, FeatureStore, RemoveMembers, SetValue

__all__ = [
    "RAND_BASE",
    "ActorIdResolver",
    "AddMembers",
    "CallableGroup",
    "DeleteKeys",
    "FeatureCatalog",
    "FeatureState",
    "FeatureStore",
    "GroupPredicate",
    "GroupRegistry",
    "InMemoryFeatureStore",
    "KeySchema",
    "RedisFeatureStore",
    "RedisSection",
    "RemoveMembers",
    "Rollout",
    "RolloutConfig",
    "RolloutError",
    "RolloutErrorCodes",
    "SetValue",
    "in_percentage",
    "load_config",
]
