from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import HTMLResponse
import logging

from ..application.services.location_service import LocationService
from ..dependencies import CurrentActor, get_current_actor, get_location_service
from ..schemas import ReverseGeocodeResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Locations"])

# Tanauan, Batangas
DEFAULT_CENTER = (14.0833, 121.15)
DEFAULT_ZOOM = 13

MAP_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Location Picker</title>
    <link rel="stylesheet" href="https://unpkg.com/leaflet@1.9.4/dist/leaflet.css" />
    <script src="https://unpkg.com/leaflet@1.9.4/dist/leaflet.js"></script>
    <style>
        body { margin: 0; padding: 0; }
        #map { height: 100vh; width: 100%; }
        .info {
            position: absolute; top: 10px; left: 10px; right: 10px;
            background: white; padding: 10px; border-radius: 5px;
            box-shadow: 0 2px 5px rgba(0,0,0,0.2); z-index: 1000; text-align: center;
        }
    </style>
</head>
<body>
    <div class="info"><strong>Tap on the map to select your location</strong></div>
    <div id="map"></div>
    <script>
        var map = L.map('map').setView([__LAT__, __LON__], __ZOOM__);
        L.tileLayer('https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png', {
            attribution: '&copy; OpenStreetMap contributors'
        }).addTo(map);

        var marker = __INITIAL_MARKER__ ? L.marker([__LAT__, __LON__]).addTo(map) : null;

        function send(payload) {
            var message = JSON.stringify(payload);
            if (window.ReactNativeWebView) {
                window.ReactNativeWebView.postMessage(message);
            } else if (window.parent && window.parent !== window) {
                window.parent.postMessage(message, '*');
            }
        }

        window.updatePopupAddress = function(address) {
            if (marker) { marker.bindPopup(address).openPopup(); }
        };

        map.on('click', function(e) {
            if (marker) { map.removeLayer(marker); }
            marker = L.marker([e.latlng.lat, e.latlng.lng]).addTo(map);
            send({ latitude: e.latlng.lat, longitude: e.latlng.lng });
        });
    </script>
</body>
</html>
"""


def render_map(latitude: float, longitude: float, zoom: int, initial_marker: bool) -> str:
    return (
        MAP_TEMPLATE
        .replace("__LAT__", repr(float(latitude)))
        .replace("__LON__", repr(float(longitude)))
        .replace("__ZOOM__", str(int(zoom)))
        .replace("__INITIAL_MARKER__", "true" if initial_marker else "false")
    )


@router.get("/locations/reverse", response_model=ReverseGeocodeResponse)
async def reverse_geocode(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    actor: CurrentActor = Depends(get_current_actor),
    service: LocationService = Depends(get_location_service),
):
    try:
        address = await service.reverse_geocode(lat, lon)
        return ReverseGeocodeResponse(latitude=lat, longitude=lon, address=address)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error reverse geocoding ({lat}, {lon}): {e}")
        raise HTTPException(status_code=500, detail="Failed to look up address")


@router.get("/map", response_class=HTMLResponse)
def map_picker(
    lat: float = Query(None, ge=-90, le=90),
    lon: float = Query(None, ge=-180, le=180),
    zoom: int = Query(DEFAULT_ZOOM, ge=1, le=19),
):
    """Leaflet picker for web views; a tap posts ``{latitude, longitude}`` to the host."""
    has_point = lat is not None and lon is not None
    center = (lat, lon) if has_point else DEFAULT_CENTER
    return HTMLResponse(render_map(center[0], center[1], zoom, has_point))
