from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    name: str = "MovieFinder"
    instructions: str | None = None
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.1:8b"
    ollama_timeout: float = 120.0
    ollama_temperature: float = 0.2
    log_level: str = "INFO"

    model_config = {"env_prefix": "MOVIE_AGENT_"}


settings = Settings()
