from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="RFSTORE_")

    app_name: str = "Romanian Football Store"
    debug: bool = False

    api_base_url: str = "http://localhost:8080/api"

    # Seconds before an outstanding request is abandoned as a transport error
    request_timeout: float = 10.0

    login_route: str = "/login"
    home_route: str = "/"


settings = Settings()


# =============================================================================
# DOMAIN BOUNDS
# =============================================================================

# Cart quantity controls are disabled outside this range
MIN_CART_QUANTITY = 1
MAX_CART_QUANTITY = 10

# Inventory rows below this many units are reported as low stock
LOW_STOCK_THRESHOLD = 5

# Display order for jersey sizes
SIZE_ORDER: dict[str, int] = {"S": 1, "M": 2, "L": 3, "XL": 4, "XXL": 5}
