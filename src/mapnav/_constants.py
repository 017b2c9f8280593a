"""Internal constants shared across the library."""

BASE_URL = "https://nominatim.openstreetmap.org"
SEARCH_PATH = "/search"
USER_AGENT = "pymapnav/0.1 (+https://github.com/mapnav/pymapnav)"

#: The geocoding service never returns more than this many results per query.
MAX_SEARCH_RESULTS = 5

#: Zoom level used for every camera animation.
DEFAULT_ZOOM = 13

#: Fallback destination shown before geolocation or search resolves.
DEFAULT_LATITUDE = 51.505
DEFAULT_LONGITUDE = -0.09

# ------------------------------------------------------------------
# Control labels
# ------------------------------------------------------------------

SHOW_DIRECTIONS_LABEL = "Show Directions"
HIDE_DIRECTIONS_LABEL = "Hide Directions"
SHOW_ITINERARY_LABEL = "Show Directions Table"
HIDE_ITINERARY_LABEL = "Hide Directions Table"
USER_MARKER_LABEL = "Your Location"
DESTINATION_MARKER_LABEL = "Destination"
