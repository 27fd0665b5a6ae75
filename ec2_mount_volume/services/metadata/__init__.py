from .backoff import Backoff
from .instance_identity import InstanceIdentity, InstanceIdentityProvider
from .volume_fetcher import VolumeMetadataFetcher

__all__ = [
    "Backoff",
    "InstanceIdentity",
    "InstanceIdentityProvider",
    "VolumeMetadataFetcher",
]
