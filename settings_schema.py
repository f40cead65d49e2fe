from typing import Literal

from pydantic import BaseModel, Field, ValidationError


class SettingsSchema(BaseModel):
    language: Literal["ru", "en"] = "ru"
    cors_origin: str = "*"
    port: int = Field(default=8080, gt=0, lt=65536)
    log_level: str = "INFO"
    default_formula: Literal["brzycki", "epley", "lander"] = "brzycki"
    page_size: int = Field(default=20, ge=1, le=100)
    api_token: str | bool = ""


def validate_settings(data: dict) -> None:
    try:
        SettingsSchema(**data)
    except ValidationError as e:
        raise ValueError(str(e))
