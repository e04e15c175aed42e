"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings


class BankSimConfig(BaseSettings):
    """Banking simulator configuration"""

    # Bank configuration
    bank_name: str = "Rustacean Bank"

    # Display configuration
    currency_symbol: str = "$"
    amount_precision: int = 2  # Decimal places shown for amounts
    date_format: str = "%Y-%m-%d"

    # Logging configuration
    log_level: str = "WARNING"
    log_format: str = "json"  # json or text

    class Config:
        env_prefix = "BANKSIM_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = BankSimConfig()


def get_config() -> BankSimConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> BankSimConfig:
    """Reload configuration from environment"""
    global config
    config = BankSimConfig()
    return config
