#Marks routing as a package.
#Re-exports the OSRM client and the driving-route builder so callers
#import from routing without knowing internal file names.
#No business logic.

from .osrm_client import OSRMClient, OSRMError, RouteGeometry
from .route_service import DrivingRoute, build_driving_route

__all__ = [
    "OSRMClient",
    "OSRMError",
    "RouteGeometry",
    "DrivingRoute",
    "build_driving_route",
]
