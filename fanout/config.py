from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Outbound webhook delivery (seconds)
    http_connect_timeout: float = 10
    http_read_timeout: float = 10

    # Refuse delivery to private/reserved addresses and internal hostnames
    block_private_networks: bool = False

    # Page size for the admin enumeration scan
    admin_page_size: int = 50

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
