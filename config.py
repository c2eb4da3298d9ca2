"""
Configuration module for the portfolio chat gateway.
Handles environment variables, provider settings and startup validation.
"""
import os
from dotenv import load_dotenv

from models.chat_models import PersonaStrategy, ProviderDescriptor, ProviderKind
from utils.exceptions import ConfigurationError

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str) -> list[str]:
    return [item.strip().lower() for item in os.getenv(name, default).split(",") if item.strip()]


def _env_number(name: str, default: str, cast=float):
    """Parse a numeric setting; a malformed value is a configuration error."""
    raw = os.getenv(name, default)
    try:
        return cast(raw.strip())
    except ValueError:
        raise ConfigurationError(f"{name} must be {cast.__name__} (got '{raw}')")


class Config:
    """Application configuration class."""

    # API Keys
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    GROQ_API_KEY: str = os.getenv("GROQ_API_KEY", "")
    OPENROUTER_API_KEY: str = os.getenv("OPENROUTER_API_KEY", "")
    HUGGINGFACE_API_KEY: str = os.getenv("HUGGINGFACE_API_KEY", "")

    # API Configuration
    GEMINI_URL: str = "https://generativelanguage.googleapis.com"
    GROQ_URL: str = "https://api.groq.com/openai/v1/chat/completions"
    OPENROUTER_URL: str = "https://openrouter.ai/api/v1/chat/completions"
    HUGGINGFACE_URL: str = "https://api-inference.huggingface.co/models/{model}"

    # Models
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")
    GEMINI_FALLBACK_MODEL: str = os.getenv("GEMINI_FALLBACK_MODEL", "gemini-1.5-flash-latest")
    GROQ_MODEL: str = os.getenv("GROQ_MODEL", "llama-3.1-8b-instant")
    OPENROUTER_MODEL: str = os.getenv("OPENROUTER_MODEL", "mistralai/mistral-7b-instruct")
    HUGGINGFACE_MODEL: str = os.getenv("HUGGINGFACE_MODEL", "mistralai/Mistral-7B-Instruct-v0.2")

    # Gemini takes the persona as a leading user turn unless set to "system"
    GEMINI_PERSONA_MODE: str = os.getenv("GEMINI_PERSONA_MODE", "history").lower()

    # Application Settings
    APP_TITLE: str = "Portfolio Chat Gateway"
    CORS_ORIGINS: list[str] = [
        origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
    ]

    # Gateway behaviour
    CHAT_STRATEGY: str = os.getenv("CHAT_STRATEGY", "fallback").lower()
    LANGUAGE_DETECTION: bool = _env_bool("LANGUAGE_DETECTION", "true")
    CHAT_PROVIDERS: list[str] = _env_list("CHAT_PROVIDERS", "gemini,groq,openrouter,huggingface")

    # Generation parameters
    TEMPERATURE: float = _env_number("TEMPERATURE", "0.7")
    MAX_TOKENS: int = _env_number("MAX_TOKENS", "512", int)

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").strip().upper()

    # Timeouts (in seconds)
    PROVIDER_TIMEOUT: float = _env_number("PROVIDER_TIMEOUT", "20.0")

    MAX_PROVIDER_CONNECTIONS: int = 20

    STRATEGIES = ("single", "fallback")

    # provider name -> credential setting
    PROVIDER_CREDENTIALS = {
        "gemini": "GEMINI_API_KEY",
        "groq": "GROQ_API_KEY",
        "openrouter": "OPENROUTER_API_KEY",
        "huggingface": "HUGGINGFACE_API_KEY",
    }

    @classmethod
    def active_providers(cls) -> list[str]:
        """
        Provider names that will serve traffic, in priority order.
        Single-provider deployments only use the first configured provider.
        """
        if cls.CHAT_STRATEGY == "single":
            return cls.CHAT_PROVIDERS[:1]
        return list(cls.CHAT_PROVIDERS)

    @classmethod
    def get_api_key(cls, env_name: str) -> str:
        """Read a provider credential by its environment variable name."""
        return getattr(cls, env_name, "")

    @classmethod
    def provider_descriptors(cls) -> list[ProviderDescriptor]:
        """
        Build descriptors for the active providers.
        Priority follows the position in CHAT_PROVIDERS.
        """
        descriptors = []
        for priority, name in enumerate(cls.active_providers()):
            descriptors.append(cls._describe(name, priority))
        return descriptors

    @classmethod
    def _describe(cls, name: str, priority: int) -> ProviderDescriptor:
        if name == "gemini":
            persona_strategy = (
                PersonaStrategy.SYSTEM if cls.GEMINI_PERSONA_MODE == "system" else PersonaStrategy.HISTORY
            )
            return ProviderDescriptor(
                name="gemini",
                kind=ProviderKind.GEMINI,
                endpoint=cls.GEMINI_URL,
                api_key_env="GEMINI_API_KEY",
                model=cls.GEMINI_MODEL,
                fallback_model=cls.GEMINI_FALLBACK_MODEL or None,
                priority=priority,
                supports_history=True,
                persona_strategy=persona_strategy,
                assistant_role="model",
                temperature=cls.TEMPERATURE,
                max_tokens=cls.MAX_TOKENS,
            )
        if name == "groq":
            return ProviderDescriptor(
                name="groq",
                kind=ProviderKind.CHAT_COMPLETION,
                endpoint=cls.GROQ_URL,
                api_key_env="GROQ_API_KEY",
                model=cls.GROQ_MODEL,
                priority=priority,
                supports_history=True,
                persona_strategy=PersonaStrategy.SYSTEM,
                temperature=cls.TEMPERATURE,
                max_tokens=cls.MAX_TOKENS,
            )
        if name == "openrouter":
            return ProviderDescriptor(
                name="openrouter",
                kind=ProviderKind.CHAT_COMPLETION,
                endpoint=cls.OPENROUTER_URL,
                api_key_env="OPENROUTER_API_KEY",
                model=cls.OPENROUTER_MODEL,
                priority=priority,
                supports_history=True,
                persona_strategy=PersonaStrategy.SYSTEM,
                temperature=cls.TEMPERATURE,
            )
        if name == "huggingface":
            return ProviderDescriptor(
                name="huggingface",
                kind=ProviderKind.TEXT_GENERATION,
                endpoint=cls.HUGGINGFACE_URL.format(model=cls.HUGGINGFACE_MODEL),
                api_key_env="HUGGINGFACE_API_KEY",
                model=cls.HUGGINGFACE_MODEL,
                priority=priority,
                supports_history=False,
                persona_strategy=PersonaStrategy.FLATTEN,
                temperature=cls.TEMPERATURE,
                max_tokens=cls.MAX_TOKENS,
            )
        raise ConfigurationError(f"Unknown chat provider '{name}'")

    @classmethod
    def validate(cls) -> None:
        """
        Validate configuration before serving traffic.

        Raises:
            ConfigurationError: unknown strategy/provider or a missing credential
        """
        if cls.CHAT_STRATEGY not in cls.STRATEGIES:
            raise ConfigurationError(
                f"CHAT_STRATEGY must be one of {', '.join(cls.STRATEGIES)} (got '{cls.CHAT_STRATEGY}')"
            )

        if cls.PROVIDER_TIMEOUT <= 0:
            raise ConfigurationError(f"PROVIDER_TIMEOUT must be positive (got {cls.PROVIDER_TIMEOUT})")

        providers = cls.active_providers()
        if not providers:
            raise ConfigurationError("CHAT_PROVIDERS is empty; configure at least one provider")

        unknown = [name for name in providers if name not in cls.PROVIDER_CREDENTIALS]
        if unknown:
            raise ConfigurationError(f"Unknown chat provider(s): {', '.join(unknown)}")

        if len(set(providers)) != len(providers):
            raise ConfigurationError("CHAT_PROVIDERS lists the same provider twice")

        missing = [
            cls.PROVIDER_CREDENTIALS[name]
            for name in providers
            if not cls.get_api_key(cls.PROVIDER_CREDENTIALS[name])
        ]
        if missing:
            raise ConfigurationError(
                f"Missing provider credential(s): {', '.join(missing)}. Set them in the environment or .env file."
            )
