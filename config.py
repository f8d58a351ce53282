"""
config.py - Konfiguracja aplikacji przez zmienne środowiskowe.
Wszystkie zmienne mają prefiks STACKCALC_.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Logging
    log_level: str = "INFO"

    # Język komunikatów błędów (klucz w messages.MESSAGES)
    message_locale: str = "en"

    # App
    app_title: str = "StackCalc"
    app_version: str = "0.1.0"

    model_config = SettingsConfigDict(env_prefix="STACKCALC_", env_file=".env", extra="ignore")
