"""Configuration models - Pure data structures.

These are domain models for configuration. The actual loading
(I/O) is handled by the shell layer.
"""

from dataclasses import dataclass, field

from src.core.geo import Coordinate
from src.core.plan import ALL_CATEGORIES, FilterMode, FilterSettings


# Konya city centre, used until (or instead of) a device location
DEFAULT_FALLBACK_LOCATION = Coordinate(latitude=37.8679, longitude=32.4849)

# Quiet period before a recompute runs
DEFAULT_DEBOUNCE_SECONDS = 0.3

DEFAULT_CATEGORIES = (
    ALL_CATEGORIES,
    "Futbol",
    "Basketbol",
    "Yüzme",
    "Tenis",
    "Voleybol",
)


@dataclass
class Config:
    """Application configuration.

    This is a pure data structure - no I/O or side effects.

    Attributes:
        fallback_location: Coordinate used when the device location is unavailable
        debounce_seconds: Debounce window for recomputes
        default_mode: Tab selected when the screen mounts
        default_category: Category selected when the screen mounts
        default_distance_km: Distance threshold when the screen mounts
        min_distance_km: Lower bound of the distance slider
        max_distance_km: Upper bound of the distance slider
        categories: Categories offered by the selector
        events_api_url: Base URL of the events backend (None to skip fetching)
        location_api_url: IP geolocation endpoint (None to use the fallback)
        request_timeout_seconds: Timeout for HTTP requests
    """
    fallback_location: Coordinate = DEFAULT_FALLBACK_LOCATION
    debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS
    default_mode: str = FilterMode.NEARBY.value
    default_category: str = ALL_CATEGORIES
    default_distance_km: float = 10.0
    min_distance_km: float = 1.0
    max_distance_km: float = 50.0
    categories: tuple[str, ...] = field(default_factory=lambda: DEFAULT_CATEGORIES)
    events_api_url: str | None = None
    location_api_url: str | None = None
    request_timeout_seconds: int = 10

    def initial_settings(self) -> FilterSettings:
        """Build the settings snapshot used at screen mount.

        Unknown modes fall back to NEARBY.
        """
        try:
            mode = FilterMode(self.default_mode)
        except ValueError:
            mode = FilterMode.NEARBY

        return FilterSettings(
            mode=mode,
            category=self.default_category,
            max_distance_km=self.default_distance_km,
        )


@dataclass
class ValidationError:
    """A configuration validation error.

    Attributes:
        field: The field that has an error
        message: Human-readable error description
        severity: 'error' or 'warning'
    """
    field: str
    message: str
    severity: str = "error"


@dataclass
class ValidationResult:
    """Result of validating configuration.

    Attributes:
        valid: True if no errors (warnings are OK)
        errors: List of validation errors/warnings
    """
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def warnings(self) -> list[ValidationError]:
        """Get only warnings."""
        return [e for e in self.errors if e.severity == "warning"]

    @property
    def critical_errors(self) -> list[ValidationError]:
        """Get only critical errors."""
        return [e for e in self.errors if e.severity == "error"]


def validate_coordinate(coordinate: Coordinate, field_name: str) -> list[ValidationError]:
    """Validate a latitude/longitude coordinate.

    Pure function.

    Args:
        coordinate: Coordinate to check
        field_name: Name of the field for error messages

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not -90 <= coordinate.latitude <= 90:
        errors.append(ValidationError(
            field=field_name,
            message=f"Latitude {coordinate.latitude} out of range [-90, 90]",
        ))

    if not -180 <= coordinate.longitude <= 180:
        errors.append(ValidationError(
            field=field_name,
            message=f"Longitude {coordinate.longitude} out of range [-180, 180]",
        ))

    return errors


def validate_config(config: Config) -> ValidationResult:
    """Validate configuration for errors and warnings.

    Pure function.

    Args:
        config: Configuration to validate

    Returns:
        ValidationResult with any errors/warnings found
    """
    errors: list[ValidationError] = []

    errors.extend(validate_coordinate(config.fallback_location, "fallback_location"))

    if config.debounce_seconds < 0:
        errors.append(ValidationError(
            field="debounce_seconds",
            message=f"Debounce must not be negative, got {config.debounce_seconds}",
        ))

    if config.min_distance_km > config.max_distance_km:
        errors.append(ValidationError(
            field="min_distance_km",
            message=f"min_distance_km ({config.min_distance_km}) > max_distance_km ({config.max_distance_km})",
        ))

    if not config.min_distance_km <= config.default_distance_km <= config.max_distance_km:
        errors.append(ValidationError(
            field="default_distance_km",
            message=(
                f"Default distance {config.default_distance_km} outside slider range "
                f"[{config.min_distance_km}, {config.max_distance_km}]"
            ),
            severity="warning",
        ))

    valid_modes = {m.value for m in FilterMode}
    if config.default_mode not in valid_modes:
        errors.append(ValidationError(
            field="default_mode",
            message=f"Unknown mode '{config.default_mode}', expected one of {sorted(valid_modes)}",
        ))

    if config.default_category not in config.categories:
        errors.append(ValidationError(
            field="default_category",
            message=f"Default category '{config.default_category}' not in categories",
            severity="warning",
        ))

    if config.request_timeout_seconds <= 0:
        errors.append(ValidationError(
            field="request_timeout_seconds",
            message=f"Request timeout must be positive, got {config.request_timeout_seconds}",
        ))

    has_critical = any(e.severity == "error" for e in errors)

    return ValidationResult(
        valid=not has_critical,
        errors=errors,
    )
