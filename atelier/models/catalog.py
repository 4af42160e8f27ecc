"""Bookable services shown on the home and booking pages."""
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class ServiceOption:
    value: str
    icon: str
    description: str
    starting_price: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


SERVICE_OPTIONS: List[ServiceOption] = [
    ServiceOption("Bridal Blouse Stitching", "styler", "Custom bridal blouse with embroidery", "Starts at ₹4,999"),
    ServiceOption("Designer Kurti", "checkroom", "Tailored designer kurti in your style", "Starts at ₹1,499"),
    ServiceOption("Saree Customization", "auto_awesome", "Perfect drape and custom blouse", "Starts at ₹2,499"),
    ServiceOption("Alterations & Fittings", "content_cut", "Expert alterations for perfect fit", "Starts at ₹199"),
    ServiceOption("Lehenga Stitching", "diamond", "Grand lehenga with detailed work"),
    ServiceOption("General Consultation", "chat", "Discuss your requirements"),
]

SERVICE_NAMES = [option.value for option in SERVICE_OPTIONS]
