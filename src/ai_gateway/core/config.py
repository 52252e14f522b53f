"""
Configuration loading for the generation gateway.

Provider credentials come from the environment. An optional YAML file can
override them and set gateway-wide defaults; ``${VAR}`` values in the file
are expanded from the environment.
"""

import os
import logging
from typing import Dict, Any, Mapping, Optional, Tuple
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from ..models.catalog import ProviderId

logger = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = Path("config/ai-gateway.yaml")

# Environment variables holding each provider's key, first match wins
ENV_API_KEYS: Dict[ProviderId, Tuple[str, ...]] = {
    ProviderId.OPENAI: ("OPENAI_API_KEY",),
    ProviderId.ANTHROPIC: ("ANTHROPIC_API_KEY",),
    ProviderId.GOOGLE: ("GOOGLE_AI_API_KEY", "GEMINI_API_KEY"),
    ProviderId.GROK: ("XAI_API_KEY", "GROK_API_KEY"),
    ProviderId.DEEPSEEK: ("DEEPSEEK_API_KEY",),
}

ENV_BASE_URLS: Dict[ProviderId, str] = {
    ProviderId.OPENAI: "OPENAI_BASE_URL",
    ProviderId.ANTHROPIC: "ANTHROPIC_BASE_URL",
    ProviderId.GOOGLE: "GOOGLE_AI_BASE_URL",
    ProviderId.GROK: "GROK_BASE_URL",
    ProviderId.DEEPSEEK: "DEEPSEEK_BASE_URL",
}

# Values shipped in .env templates; a key equal to one of these is unset
PLACEHOLDER_API_KEYS = frozenset({
    "your_openai_api_key_here",
    "your_anthropic_api_key_here",
    "your_google_ai_api_key_here",
    "your_grok_api_key_here",
    "your_xai_api_key_here",
    "your_deepseek_api_key_here",
    "your_api_key_here",
})


def is_placeholder_key(api_key: Optional[str]) -> bool:
    """Check whether a key is a template placeholder rather than a credential."""
    return bool(api_key) and api_key.strip().lower() in PLACEHOLDER_API_KEYS


def is_usable_key(api_key: Optional[str]) -> bool:
    """Check whether a key is present, not blank and not a placeholder."""
    return bool(api_key and api_key.strip()) and not is_placeholder_key(api_key)


@dataclass
class ProviderConfig:
    """Credentials and endpoint for a single provider."""
    provider: ProviderId
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    timeout: Optional[float] = None

    @property
    def has_key(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    @property
    def is_usable(self) -> bool:
        return is_usable_key(self.api_key)


@dataclass
class GatewayConfig:
    """Complete gateway configuration."""
    providers: Dict[ProviderId, ProviderConfig] = field(default_factory=dict)
    default_temperature: float = 0.7
    default_max_tokens: int = 1000
    request_timeout: float = 60.0

    def provider(self, provider: ProviderId) -> ProviderConfig:
        """Config for a provider; an empty entry if nothing was supplied."""
        return self.providers.get(provider) or ProviderConfig(provider=provider)

    def timeout_for(self, provider: ProviderId) -> float:
        return self.provider(provider).timeout or self.request_timeout


def load_config(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> GatewayConfig:
    """
    Load gateway configuration.

    Args:
        config_path: Path to a YAML file. If None, uses ``AI_GATEWAY_CONFIG``
            or the default location when present.
        environ: Environment mapping. Defaults to ``os.environ``.

    Returns:
        Loaded configuration
    """
    env = os.environ if environ is None else environ
    config = _config_from_env(env)

    if config_path is None:
        config_path = env.get("AI_GATEWAY_CONFIG")
        if config_path is None and DEFAULT_CONFIG_PATH.exists():
            config_path = str(DEFAULT_CONFIG_PATH)

    if config_path is None:
        return config

    if not Path(config_path).exists():
        logger.warning(f"Gateway config file {config_path} not found, using environment only")
        return config

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Failed to load config from {config_path}: {e}")
        return config

    if not isinstance(data, dict):
        logger.error(f"Ignoring config file {config_path}: expected a mapping")
        return config

    return _apply_file_config(config, data, env)


def _config_from_env(env: Mapping[str, str]) -> GatewayConfig:
    """Build configuration from environment variables."""
    providers = {}
    for provider in ProviderId:
        api_key = None
        for var in ENV_API_KEYS[provider]:
            value = env.get(var)
            if value and value.strip():
                api_key = value
                break
        providers[provider] = ProviderConfig(
            provider=provider,
            api_key=api_key,
            base_url=env.get(ENV_BASE_URLS[provider]) or None,
        )

    return GatewayConfig(
        providers=providers,
        default_temperature=_env_number(env, "AI_DEFAULT_TEMPERATURE", 0.7, float),
        default_max_tokens=_env_number(env, "AI_DEFAULT_MAX_TOKENS", 1000, int),
        request_timeout=_env_number(env, "AI_REQUEST_TIMEOUT", 60.0, float),
    )


def _env_number(env: Mapping[str, str], name: str, default, cast):
    raw = env.get(name)
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}, using {default}")
        return default


def _expand(value: Any, env: Mapping[str, str]) -> Any:
    """Expand a ``${VAR}`` reference; other values pass through."""
    if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
        return env.get(value[2:-1], "")
    return value


def _file_number(section: Dict[str, Any], key: str, default, cast, where: str):
    """Read a number from a config section, keeping ``default`` if invalid."""
    raw = section.get(key)
    if raw is None:
        return default
    try:
        return cast(raw)
    except (TypeError, ValueError):
        logger.error(f"Ignoring invalid {where}.{key}={raw!r} in config file, using {default}")
        return default


def _file_string(value: Any, env: Mapping[str, str]) -> Optional[str]:
    """Expanded string value, or None when missing or blank."""
    value = _expand(value, env)
    if isinstance(value, str) and value.strip():
        return value
    return None


def _apply_file_config(
    config: GatewayConfig,
    data: Dict[str, Any],
    env: Mapping[str, str],
) -> GatewayConfig:
    """Overlay a parsed YAML document onto environment configuration."""
    defaults = data.get("defaults") or {}
    if isinstance(defaults, dict):
        config.default_temperature = _file_number(
            defaults, "temperature", config.default_temperature, float, "defaults"
        )
        config.default_max_tokens = _file_number(
            defaults, "max_tokens", config.default_max_tokens, int, "defaults"
        )
        config.request_timeout = _file_number(
            defaults, "timeout", config.request_timeout, float, "defaults"
        )
    else:
        logger.error(f"Ignoring config section 'defaults': expected a mapping, got {defaults!r}")

    providers = data.get("providers") or {}
    if not isinstance(providers, dict):
        logger.error(f"Ignoring config section 'providers': expected a mapping, got {providers!r}")
        return config

    for name, provider_data in providers.items():
        provider = ProviderId.parse(name)
        if provider is None:
            logger.warning(f"Ignoring config for unknown provider: {name}")
            continue

        provider_data = provider_data or {}
        if not isinstance(provider_data, dict):
            logger.error(f"Ignoring config for provider {name}: expected a mapping")
            continue

        current = config.provider(provider)
        config.providers[provider] = ProviderConfig(
            provider=provider,
            api_key=_file_string(provider_data.get("api_key"), env) or current.api_key,
            base_url=_file_string(provider_data.get("base_url"), env) or current.base_url,
            timeout=_file_number(
                provider_data, "timeout", current.timeout, float, f"providers.{name}"
            ),
        )

    return config
