"""Location schemas."""
from pydantic import BaseModel
from typing import Optional


class CountryPartBase(BaseModel):
    area_name: str = ""
    postal_code: str = ""
    country_part: str = ""

    def is_empty(self) -> bool:
        """All fields blank means "no country part"."""
        return not any(
            value.strip() for value in (self.area_name, self.postal_code, self.country_part)
        )


class LocationBase(BaseModel):
    name: str
    longitude: float
    latitude: float
    area_name: str = ""
    postal_code: str = ""
    country_part: str = ""

    @property
    def country_part_value(self) -> CountryPartBase:
        return CountryPartBase(
            area_name=self.area_name,
            postal_code=self.postal_code,
            country_part=self.country_part,
        )


class LocationCreate(LocationBase):
    pass


class LocationUpdate(LocationBase):
    """Longitude and latitude are accepted but never applied."""


class Location(LocationBase):
    id: int
    coordinates_id: int
    country_part_id: Optional[int] = None
