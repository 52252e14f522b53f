"""
Deployment-level configuration checks.
"""

import logging

from .config import GatewayConfig, is_usable_key
from .errors import MisconfiguredDeploymentError
from ..models.catalog import ProviderId
from ..models.response import ConfigurationReport

logger = logging.getLogger(__name__)


class ConfigurationValidator:
    """
    Reports which providers this deployment can use.

    Results are a pure function of the configuration, so repeated calls
    agree as long as the configuration does not change.
    """

    def __init__(self, config: GatewayConfig):
        self._config = config

    def validate(self) -> ConfigurationReport:
        """
        Check every provider's credential.

        Returns:
            Report listing configured and missing providers, with one error
            message per missing provider
        """
        configured = []
        missing = []
        errors = []

        for provider in ProviderId:
            entry = self._config.provider(provider)
            if is_usable_key(entry.api_key):
                configured.append(provider)
            elif not entry.has_key:
                missing.append(provider)
                errors.append(f"{provider.value}: API key not found in environment variables")
            else:
                missing.append(provider)
                errors.append(f"{provider.value}: Invalid API key")

        return ConfigurationReport(
            is_healthy=not errors,
            configured_providers=configured,
            missing_providers=missing,
            errors=errors,
        )

    def ensure_usable(self) -> ConfigurationReport:
        """
        Validate and fail if no provider at all is configured.

        Raises:
            MisconfiguredDeploymentError: If every provider is missing
        """
        report = self.validate()
        if not report.configured_providers:
            logger.error(f"No AI provider configured: {report.errors}")
            raise MisconfiguredDeploymentError(report.errors)
        if report.missing_providers:
            logger.debug(f"Unconfigured providers: {[p.value for p in report.missing_providers]}")
        return report
