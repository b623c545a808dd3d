# app/schemas/locations/location.py
from pydantic import BaseModel, Field

class LocationBody(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    address: str = Field(min_length=1, max_length=500)

class ReverseGeocodeResponse(BaseModel):
    latitude: float
    longitude: float
    address: str

class ProfileImageResponse(BaseModel):
    profile_image_url: str
