"""Mock API resource clients and response normalization."""

from infinity_clients.resources.client import ResourceClient
from infinity_clients.resources.models import LookupResult, NormalizedResult
from infinity_clients.resources.normalizer import detect_shape, normalize
from infinity_clients.resources.probe import EndpointProbe, EndpointReport

__all__ = [
    "ResourceClient",
    "NormalizedResult",
    "LookupResult",
    "detect_shape",
    "normalize",
    "EndpointProbe",
    "EndpointReport",
]
