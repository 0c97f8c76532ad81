from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""

    GROQ_API_KEY: str = ""
    GROQ_URL: str = "https://api.groq.com/openai/v1/chat/completions"
    GROQ_MODEL: str = "llama-3.3-70b-versatile"
    GROQ_TIMEOUT: int = 30

    OPENROUTE_API_KEY: str = ""
    OPENROUTE_URL: str = "https://api.openrouteservice.org/v2/directions/driving-car"
    USE_OPENROUTE: bool = True
    OPENROUTE_TIMEOUT: int = 10

    OPENWEATHER_API_KEY: str = ""
    OPENWEATHER_URL: str = "https://api.openweathermap.org/data/2.5/forecast"
    OPENWEATHER_TIMEOUT: int = 10

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
    ]

    LOG_LEVEL: str = "INFO"


settings = Settings()
