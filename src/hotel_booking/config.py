"""
Настройки приложения.
Читаются из переменных окружения с префиксом HOTEL_ и файла .env.
"""

from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .hotel.domain import StayLengthMode


class Settings(BaseSettings):
    """Настройки отеля и консольного приложения."""

    # Данные отеля
    name: str = "El mirador"
    address: str = "Calle Entornos de Desarrollo 6"
    phone: str = "123456789"

    # Заполнять ли отель демонстрационными номерами и клиентами
    seed_demo_data: bool = True

    stay_length_mode: StayLengthMode = StayLengthMode.DAY_OF_YEAR

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "ERROR"

    model_config = SettingsConfigDict(env_prefix="HOTEL_", env_file=".env", extra="ignore")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Уровень логирования принимается в любом регистре."""
        if isinstance(v, str):
            return v.strip().upper()
        return v
