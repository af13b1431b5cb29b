# cleanup_tracker/services/service_catalog.py
"""Service types offered by the detail shop and their expected durations."""

DEFAULT_EXPECTED_MINUTES = 60

SERVICE_EXPECTATIONS = {
    "Cleanup":  {"duration": 45,  "description": "Interior/exterior basic cleaning"},
    "Detail":   {"duration": 120, "description": "Full interior and exterior detailing"},
    "Delivery": {"duration": 30,  "description": "Final prep and delivery setup"},
    "Rewash":   {"duration": 20,  "description": "Quick wash and rinse"},
    "Lot Car":  {"duration": 60,  "description": "Lot positioning and prep"},
    "FCTP":     {"duration": 90,  "description": "Ford Customer Trade Program prep"},
    "Touch-up": {"duration": 30,  "description": "Minor paint and interior touch-ups"},
}


def expected_minutes(service_type: str) -> int:
    entry = SERVICE_EXPECTATIONS.get(service_type)
    return entry["duration"] if entry else DEFAULT_EXPECTED_MINUTES
