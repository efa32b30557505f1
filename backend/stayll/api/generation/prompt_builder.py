"""
Prompt Builder - turns a property record into a listing-generation prompt
"""

from typing import Any, Iterable, Mapping, Optional


def _get(source: Any, name: str, default: Any) -> Any:
    if isinstance(source, Mapping):
        value = source.get(name, default)
    else:
        value = getattr(source, name, default)
    return default if value is None else value


def _format_number(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _yes_no(flag: Optional[bool]) -> str:
    return "Yes" if flag else "No"


def build_listing_prompt(property_record: Any) -> str:
    """
    Build the generation prompt for a property.

    Accepts either an ORM ``Property`` or a plain mapping with the same
    attribute names. Missing fields fall back to empty values.
    """
    title = _get(property_record, "title", "")
    bedrooms = _get(property_record, "number_of_bedrooms", 0)
    bathrooms = _get(property_record, "number_of_bathrooms", 0)
    address = _get(property_record, "address", "")
    city = _get(property_record, "city", "")
    state = _get(property_record, "state", "")
    rent = _get(property_record, "rent", 0)
    amenities: Iterable[str] = _get(property_record, "amenities", [])
    description = _get(property_record, "description", "")

    location = ", ".join(part for part in (address, city, state) if part)

    return (
        "Create a professional rental listing for:\n"
        f"- {title}\n"
        f"- {_format_number(bedrooms)} bedroom, {_format_number(bathrooms)} bathroom\n"
        f"- Located at {location}\n"
        f"- Rent: ${_format_number(rent)}/month\n"
        f"- Amenities: {', '.join(str(a) for a in amenities)}\n"
        f"- Description: {description}\n"
        f"- Pet friendly: {_yes_no(_get(property_record, 'pet_friendly', False))}\n"
        f"- Utilities included: {_yes_no(_get(property_record, 'utilities_included', False))}\n"
        "\n"
        "Make it attractive and professional for potential renters."
    )
