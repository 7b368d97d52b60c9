# agency_listings/catalog.py
"""Static service and city catalog used to resolve page slugs to display names."""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Service:
    name: str
    slug: str


@dataclass(frozen=True)
class City:
    name: str
    slug: str
    state: Optional[str] = None


SERVICES = (
    Service("Custom Software Development", "custom-software-development"),
    Service("Mobile App Development", "mobile-app-development"),
    Service("iPhone App Development", "iphone-app-development"),
    Service("Android App Development", "android-app-development"),
    Service("Flutter App Development", "flutter-app-development"),
    Service("React Native Development", "react-native-development"),
    Service("Web Development", "web-development"),
    Service("Laravel Development", "laravel-development"),
    Service("Node.js Development", "nodejs-development"),
    Service("E-Commerce Development", "ecommerce-development"),
    Service("UX/UI Design", "ux-ui-design"),
    Service("AI Development", "ai-development"),
    Service("Machine Learning", "machine-learning"),
    Service("AWS Consulting", "aws-consulting"),
    Service("Azure Consulting", "azure-consulting"),
    Service("Cloud Services", "cloud-services"),
    Service("Blockchain Development", "blockchain-development"),
    Service("Data Analytics", "data-analytics"),
    Service("Cybersecurity", "cybersecurity"),
    Service("IoT Development", "iot-development"),
)

CITIES = (
    City("New York", "new-york", "NY"),
    City("Los Angeles", "los-angeles", "CA"),
    City("San Francisco", "san-francisco", "CA"),
    City("Chicago", "chicago", "IL"),
    City("Austin", "austin", "TX"),
    City("Dallas", "dallas", "TX"),
    City("Houston", "houston", "TX"),
    City("Seattle", "seattle", "WA"),
    City("Boston", "boston", "MA"),
    City("Denver", "denver", "CO"),
    City("Miami", "miami", "FL"),
    City("Atlanta", "atlanta", "GA"),
    City("Phoenix", "phoenix", "AZ"),
    City("Philadelphia", "philadelphia", "PA"),
    City("Washington DC", "washington-dc", "DC"),
)

_SERVICES_BY_SLUG = {s.slug: s for s in SERVICES}
_CITIES_BY_SLUG = {c.slug: c for c in CITIES}


def find_service(slug: str) -> Optional[Service]:
    return _SERVICES_BY_SLUG.get(slug)


def find_city(slug: str) -> Optional[City]:
    return _CITIES_BY_SLUG.get(slug)


def city_name_from_slug(slug: str) -> str:
    """'san-francisco' -> 'San Francisco' for cities missing from the catalog."""
    return " ".join(part.capitalize() for part in slug.split("-") if part)
