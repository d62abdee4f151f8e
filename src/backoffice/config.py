"""
Configuration de l'application.

Les valeurs sont lues depuis les variables d'environnement préfixées
par BACKOFFICE_ (ex. BACKOFFICE_DATABASE_URI), avec des valeurs
par défaut adaptées au développement.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="BACKOFFICE_")

    database_uri: str = "sqlite:///backoffice.db"

    # Préfixe des cases « appliquer à toutes les boutiques » des formulaires
    modify_all_shops_prefix: str = "modify_all_shops_"

    smtp_host: str = "localhost"
    smtp_port: int = 587
    low_stock_alert_email: str = "stock@example.com"
    notification_sender: str = "backoffice@example.com"

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
