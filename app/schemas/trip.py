import datetime as dt
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Optional

DATE_FORMAT = "%Y-%m-%d"


class TripRequest(BaseModel):
    initial_destination: str = Field(..., min_length=1)
    final_destination: str = Field(..., min_length=1)
    start_date: str
    end_date: str
    num_travelers: int = Field(..., ge=1)
    mood: str = ""

    @field_validator("initial_destination", "final_destination")
    @classmethod
    def strip_destination(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("destination must not be blank")
        return v

    @field_validator("start_date", "end_date")
    @classmethod
    def check_date(cls, v: str) -> str:
        try:
            dt.datetime.strptime(v, DATE_FORMAT)
        except ValueError:
            raise ValueError(f"'{v}' is not a valid YYYY-MM-DD date")
        return v

    @model_validator(mode="after")
    def check_range(self) -> "TripRequest":
        if self.end < self.start:
            raise ValueError("end_date must not be before start_date")
        return self

    @property
    def start(self) -> dt.date:
        return dt.datetime.strptime(self.start_date, DATE_FORMAT).date()

    @property
    def end(self) -> dt.date:
        return dt.datetime.strptime(self.end_date, DATE_FORMAT).date()

    @property
    def duration_days(self) -> int:
        return (self.end - self.start).days + 1


class TripResponse(BaseModel):
    tripid: int
    tripdetails: str
    message: str


class SaveTripRequest(BaseModel):
    tripid: int


class SavedTrip(BaseModel):
    tripid: int
    tripdetails: str
    saved_at: Optional[str] = None


class Forecast(BaseModel):
    date: str
    temp: float
    feels_like: float
    temp_min: float
    temp_max: float
    humidity: int
    description: str
    icon: str = ""
    wind_speed: float = 0.0
    rain_chance: float = 0.0


class WeatherData(BaseModel):
    city: str = ""
    country: str = ""
    forecasts: List[Forecast] = []
    error_msg: Optional[str] = None
