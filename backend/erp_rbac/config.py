from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    OWNER_EMAIL: str = "owner@example.com"
    RBAC_INHERIT_ROLE_DEFAULTS: bool = True
    RBAC_LOG_DENIALS: bool = True

    class Config:
        env_file = ".env"


settings = Settings()
