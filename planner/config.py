# planner/config.py
import os
from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from typing import List
from dotenv import load_dotenv
load_dotenv()

class Settings(BaseSettings):
    # Application Settings
    session_ttl_hours: int = 4
    max_budget: float = 1000000
    max_travelers: int = 50
    allowed_origins: List[str] = ["http://localhost:3000"]
    log_level: str = "INFO"

    # Gemini Configuration
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"
    llm_temperature: float = 0.7
    llm_top_p: float = 0.95
    llm_max_output_tokens: int = 8192

    # Cloud Run
    port: int = 8080

    # Pydantic V2 configuration
    model_config = ConfigDict(
        env_file=".env",
        extra="ignore"  # Allow extra environment variables without validation errors
    )

class CloudRunConfig:
    """Configuration for Cloud Run deployment"""

    # Environment Detection
    IS_CLOUD_RUN: bool = os.getenv("K_SERVICE") is not None

    PORT: int = int(os.getenv("PORT", "8080"))

settings = Settings()
cloud_config = CloudRunConfig()
