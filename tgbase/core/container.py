"""Dependency-injection container.

Wires settings, the shared HTTP session, the response sink and the clients
together so that applications get ready-made clients without rebuilding the
logging setup by hand.
"""

from pathlib import Path

from dependency_injector import containers, providers

from tgbase.api.async_client import AsyncBotClient
from tgbase.api.client import BotClient, create_session
from tgbase.config import Config
from tgbase.services.log_forwarder import AsyncLogChannelForwarder, LogChannelForwarder, LoggerSink


class Container(containers.DeclarativeContainer):
    """DI container for the Bot API clients.

    ``config.response_sink`` selects where raw responses go: ``logger`` for
    the logging tree, ``channel`` for the Telegram log channel.
    """

    config = providers.Configuration()

    app_config = providers.Singleton(Config, config_dir=config.config_dir)
    settings = app_config.provided.bot

    session = providers.Singleton(create_session, settings=settings)

    # Clients without a sink, used to post to the log channel
    log_client = providers.Singleton(BotClient, settings=settings, session=session)
    async_log_client = providers.Singleton(AsyncBotClient, settings=settings)

    response_sink = providers.Selector(
        config.response_sink,
        logger=providers.Singleton(LoggerSink),
        channel=providers.Singleton(LogChannelForwarder, client=log_client),
    )
    async_response_sink = providers.Selector(
        config.response_sink,
        logger=providers.Singleton(LoggerSink),
        channel=providers.Singleton(AsyncLogChannelForwarder, client=async_log_client),
    )

    client = providers.Singleton(BotClient, settings=settings, response_sink=response_sink, session=session)
    # closing async_client also closes async_log_client through the sink
    async_client = providers.Singleton(AsyncBotClient, settings=settings, response_sink=async_response_sink)


def create_container(config_dir: Path | None = None, response_sink: str = "logger") -> Container:
    """Create a configured container.

    Args:
        config_dir: Directory holding ``tgbase.yml``, defaults to the working directory.
        response_sink: ``logger`` or ``channel``.

    Returns:
        Container ready to provide clients.
    """
    container = Container()
    container.config.config_dir.from_value(config_dir)
    container.config.response_sink.from_value(response_sink)
    return container
