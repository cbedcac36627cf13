from typing import ClassVar

from docintake.analysis.base import BaseAnalyzer
from docintake.analysis.example_client_adapter import ExampleClientAdapter
from docintake.analysis.fallback import FallbackAnalyzer
from docintake.analysis.generative import GenerativeAnalyzer
from docintake.analysis.openai_client_adapter import OpenAIClientAdapter
from docintake.analysis.resilient import ResilientAnalyzer
from docintake.config.settings import Settings
from docintake.logging.logger import Log


class AnalyzerFactory:
    """Creates the configured analyzer.

    Hosted providers are wrapped in ResilientAnalyzer; a provider without
    credentials degrades to FallbackAnalyzer.
    """

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }

    # Providers that run without an API key.
    KEYLESS_PROVIDERS: ClassVar[frozenset[str]] = frozenset({"ollama", "openai_compatible"})

    PLACEHOLDER_KEYS: ClassVar[frozenset[str]] = frozenset(
        {"your-api-key-here", "changeme", "sk-..."}
    )

    @classmethod
    def create(cls, settings: Settings) -> BaseAnalyzer:
        """Create a configured analyzer from application settings."""
        provider = settings.analysis_provider.lower()
        if provider == "fallback":
            return FallbackAnalyzer()
        if provider == "example":
            return ResilientAnalyzer(
                GenerativeAnalyzer(client=ExampleClientAdapter(), model="example")
            )

        base_url = cls._resolve_base_url(provider, settings)
        api_key = cls._resolve_api_key(provider, settings)
        if provider not in cls.KEYLESS_PROVIDERS and not cls._is_usable_key(api_key):
            Log.warning(
                f"No API key configured for analysis provider '{provider}', "
                "using fallback analysis"
            )
            return FallbackAnalyzer()

        client = OpenAIClientAdapter(
            api_key=api_key or "not-needed",
            timeout_seconds=settings.analysis_timeout_seconds,
            base_url=base_url,
        )
        generative = GenerativeAnalyzer(
            client=client,
            model=cls._resolve_model_name(provider, settings),
            temperature=settings.analysis_temperature,
            max_tokens=settings.analysis_max_tokens,
            excerpt_chars=settings.analysis_excerpt_chars,
        )
        return ResilientAnalyzer(generative, FallbackAnalyzer())

    @classmethod
    def _is_usable_key(cls, api_key: str) -> bool:
        key = api_key.strip()
        return bool(key) and key.lower() not in cls.PLACEHOLDER_KEYS

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = (settings.analysis_openai_compatible_base_url or "").strip()
            if not url:
                raise ValueError(
                    "analysis_openai_compatible_base_url is required for "
                    "analysis_provider=openai_compatible"
                )
            return url
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return default_base_url
        supported = [
            "fallback",
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(
            f"Unknown analysis provider '{provider}'. Choose from: {supported}"
        )

    @classmethod
    def _resolve_api_key(cls, provider: str, settings: Settings) -> str:
        key_map = {
            "openai": settings.analysis_openai_api_key,
            "openai_compatible": settings.analysis_openai_compatible_api_key,
            "openrouter": settings.analysis_openrouter_api_key,
            "groq": settings.analysis_groq_api_key,
            "together": settings.analysis_together_api_key,
            "deepseek": settings.analysis_deepseek_api_key,
            "ollama": settings.analysis_ollama_api_key,
        }
        return key_map.get(provider, "") or ""

    @classmethod
    def _resolve_model_name(cls, provider: str, settings: Settings) -> str:
        key_map = {
            "openai": settings.analysis_openai_model_name,
            "openai_compatible": settings.analysis_openai_compatible_model_name,
            "openrouter": settings.analysis_openrouter_model_name,
            "groq": settings.analysis_groq_model_name,
            "together": settings.analysis_together_model_name,
            "deepseek": settings.analysis_deepseek_model_name,
            "ollama": settings.analysis_ollama_model_name,
        }
        return key_map.get(provider, "") or ""
