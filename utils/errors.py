"""
Error taxonomy for the alert pipeline
"""


class AlertPipelineError(Exception):
    """Base class for failures inside the alert pipeline"""


class LocationNotFoundError(AlertPipelineError):
    """Geocoding returned no candidate for a location"""

    def __init__(self, location: str, search_term: str):
        self.location = location
        self.search_term = search_term
        super().__init__(
            f"Location not found: {search_term} (extracted from {location}). "
            "Please check the spelling or try a nearby major city."
        )


class ForecastUnavailableError(AlertPipelineError):
    """The AQI series is missing or empty for resolved coordinates"""


class DeliveryError(AlertPipelineError):
    """The SMS collaborator rejected the message or could not be reached"""


class PersistenceError(AlertPipelineError):
    """The alert/user/health store could not be read or written"""


class GeocodingUnavailableError(AlertPipelineError):
    """The geocoding collaborator could not be reached or answered with an error"""
