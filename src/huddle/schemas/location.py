"""Location option schemas derived from the country/state/city API."""

from pydantic import BaseModel


class CountryOption(BaseModel):
    """Country select option keyed by ISO2 code."""

    value: str
    label: str
    full_name: str


class CityOption(BaseModel):
    """City select option."""

    id: int | str | None = None
    value: str
    label: str
