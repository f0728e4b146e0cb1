#Purpose: The OSRM "adapter/client".
#Sole responsibility: talk to OSRM via HTTP and return normalized outputs.
#Encapsulates OSRM-specific details:
#coordinate formatting (lon,lat)
#URL construction (/route)
#timeouts and error handling
#parsing the GeoJSON geometry back into internal Points
#It should not contain privacy rules; routes it returns are exact and unredacted.


from dataclasses import dataclass
from dotenv import load_dotenv
import os
from typing import List, Optional
import requests

from privacy.models import Point

# Read OSRM base URL from environment
# Example in .env:
# BASE_URL=http://router.project-osrm.org
load_dotenv()


class OSRMError(Exception):
    """Custom exception for OSRM client errors."""
    pass


@dataclass(frozen=True)
class RouteGeometry:
    """
    Normalized output of an OSRM /route call.
    """
    points: List[Point]
    distance_m: float  # total route length, meters
    duration_s: float  # total travel time, seconds


class OSRMClient:
    """
    OSRM Adapter / Client

    Sole responsibility:
    - Talk to OSRM via HTTP
    - Convert internal Point(lat, lng) -> OSRM (lon,lat)
    - Return normalized outputs

    """
    def __init__(self, profile: str = "driving", timeout: int = 5, base_url: Optional[str] = None):
        self.base_url = (base_url or os.getenv("BASE_URL") or "").rstrip("/")
        self.timeout = timeout #the time to wait for a response from OSRM before giving up
        self.profile = profile #the mode of transportation (driving, walking, cycling)

        if not self.base_url:
            raise ValueError("OSRM base URL not set. Please set BASE_URL in the .env file.")

    def format_coordinates(self, points: List[Point]) -> str:
        """Convert list of Points to OSRM format 'lon,lat;lon,lat;...'"""
        return ';'.join(f"{point.lng},{point.lat}" for point in points)

    def compute_route(self, waypoints: List[Point]) -> RouteGeometry:
        """
        Calls the OSRM /route endpoint through the waypoints in order and
        returns the full route geometry plus distance and duration.
        """
        if len(waypoints) < 2:
            raise ValueError("At least two waypoints are required to compute a route.")

        coordinates = self.format_coordinates(waypoints)
        url = f"{self.base_url}/route/v1/{self.profile}/{coordinates}"

        try:
            response = requests.get(
                url,
                params={
                    "overview": "full",       # full-resolution polyline, not simplified
                    "geometries": "geojson",  # [lon, lat] pairs, no polyline decoding needed
                    "alternatives": "false",
                },
                timeout=self.timeout,
            )
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            raise OSRMError(f"OSRM request failed: {e}") from e

        #validating OSRM response
        if data.get("code") != "Ok" or not data.get("routes"):
            raise OSRMError(f"OSRM error: {data.get('message', 'Unknown error')}")

        route = data["routes"][0] #take the first route (OSRM may return multiple routes)

        #GeoJSON coordinates are [lon, lat]
        points = [Point(lat=lat, lng=lon) for lon, lat in route["geometry"]["coordinates"]]

        return RouteGeometry(
            points=points,
            distance_m=float(route["distance"]),
            duration_s=float(route["duration"]),
        )
