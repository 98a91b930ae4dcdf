"""
Service Factories - Wire configuration, transport and client together.

Usage:
    # From JIRA_* environment variables / .env
    client = create_client()
    issues = IssueService(client)

Testing:
    # Inject a mock transport
    client = create_client(config, transport=mock_transport)
"""

import logging
from typing import Any, Optional

from .ports.config_provider import ConfigProviderPort, JiraConfig
from .ports.transport import HttpTransportPort


logger = logging.getLogger("Services")


def load_config(provider: Optional[ConfigProviderPort] = None) -> JiraConfig:
    """
    Load configuration, from the environment unless a provider is given.

    Raises:
        ConfigurationError: If the configuration is invalid
    """
    if provider is None:
        from jira_rest.adapters.config import EnvironmentConfigProvider

        provider = EnvironmentConfigProvider()

    config = provider.load()
    logger.debug(f"Loaded configuration from {provider.name} for {config.host}")
    return config


def create_transport(config: JiraConfig) -> HttpTransportPort:
    """Create the default requests-based transport."""
    from jira_rest.adapters.http import RequestsTransport

    return RequestsTransport.from_config(config)


def create_client(
    config: Optional[JiraConfig] = None,
    transport: Optional[HttpTransportPort] = None,
    log: Any = None,
    configure_logging: bool = False,
) -> Any:
    """
    Create a JiraClient.

    Args:
        config: Configuration (loaded from the environment when omitted)
        transport: Transport (a RequestsTransport when omitted)
        log: Logger for the client
        configure_logging: Apply the config's log level/file/format to the
            root logger

    Returns:
        JiraClient
    """
    from jira_rest.adapters.jira import JiraClient

    if config is None:
        config = load_config()

    if configure_logging:
        from jira_rest.logging import configure_logging as apply_logging

        apply_logging(config)

    if transport is None:
        transport = create_transport(config)

    return JiraClient(config, transport, log)
