from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    nodit_api_key: str = "demo-key"
    nodit_base_url: str = "https://web3.nodit.io/v1"
    nodit_network: str = "mainnet"
    nodit_rate_per_second: float = 5.0
    http_timeout: float = 30.0
    default_chain: str = "ethereum"
    log_level: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
