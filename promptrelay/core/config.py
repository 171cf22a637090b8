"""Konfigurationsmodul für den Prompt Relay: lädt Port, Perplexity-Zugang,
Prompt-Allow-List und E-Mail-Transport via Pydantic-Settings."""
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ALLOWED_PROMPTS = [
    "What is your name?",
    "Tell me a joke.",
    "What is the weather today?",
    "What is the time?",
]


class Settings(BaseSettings):
    """Hält alle konfigurierbaren Werte, die der Relay zur Laufzeit
    benötigt. Wird einmal beim Start gebaut und danach nur gelesen."""

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    log_file: str = ""  # Leer = nur Konsole.

    perplexity_api_key: str = Field("", alias="PERPLEXITY_API_KEY")  # Muss per Env gesetzt werden.
    perplexity_base_url: str = Field("https://api.perplexity.ai", alias="PERPLEXITY_BASE_URL")
    perplexity_model: str = Field("sonar", alias="PERPLEXITY_MODEL")
    allowed_prompts: List[str] = Field(
        default_factory=lambda: list(DEFAULT_ALLOWED_PROMPTS), alias="ALLOWED_PROMPTS"
    )

    email_transport: Literal["smtp", "resend"] = Field("smtp", alias="EMAIL_TRANSPORT")
    smtp_host: str = Field("", alias="SMTP_HOST")
    smtp_port: int = Field(587, alias="SMTP_PORT")
    smtp_user: str = Field("", alias="SMTP_USER")
    smtp_password: str = Field("", alias="SMTP_PASS")
    resend_api_key: str = Field("", alias="RESEND_API_KEY")
    mail_from: str = Field("", alias="MAIL_FROM")
    contact_recipient: str = Field("", alias="CONTACT_RECIPIENT")
