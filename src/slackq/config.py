"""Configuration loaded from environment variables."""

import os
from dataclasses import dataclass, field
from pathlib import Path

from .agent import AgentConfig
from .llm import DEFAULT_MODEL
from .memory import MemoryConfig
from .slack import BrokerConfig

TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class StoreConfig:
    """Local state locations."""

    db_path: Path = field(default_factory=lambda: Path.home() / ".slackq" / "threads.db")
    log_dir: Path = field(default_factory=lambda: Path.home() / ".slackq" / "logs")


@dataclass
class SlackConfig:
    """Slack ingress and reply-posting settings."""

    bot_token: str | None = None
    signing_secret: str | None = None
    host: str = "0.0.0.0"
    port: int = 3000


@dataclass
class Settings:
    """All configuration for one process."""

    agent: AgentConfig = field(default_factory=AgentConfig)
    broker: BrokerConfig = field(default_factory=BrokerConfig)
    memory: MemoryConfig = field(default_factory=MemoryConfig)
    slack: SlackConfig = field(default_factory=SlackConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    groq_api_key: str | None = None


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in TRUE_VALUES


def config_from_env() -> Settings:
    """Load configuration from environment variables."""
    default_user = os.getenv("SLACKQ_DEFAULT_USER", "dog")

    agent_config = AgentConfig(
        model=os.getenv("GROQ_MODEL", DEFAULT_MODEL),
        default_user_id=default_user,
        include_thread_history=_env_bool("SLACKQ_INCLUDE_HISTORY", True),
        auto_create_thread=_env_bool("SLACKQ_AUTO_CREATE_THREAD", True),
        workspace_url=os.getenv("SLACK_WORKSPACE_URL", "https://slack.com"),
    )

    broker_config = BrokerConfig(
        api_key=os.getenv("COMPOSIO_API_KEY"),
        base_url=os.getenv("COMPOSIO_BASE_URL", "https://backend.composio.dev/api/v3"),
        user_id=os.getenv("COMPOSIO_USER_ID", default_user),
    )

    memory_config = MemoryConfig(
        api_key=os.getenv("ZEP_API_KEY"),
        base_url=os.getenv("ZEP_BASE_URL", "https://api.getzep.com/api/v2"),
    )

    slack_config = SlackConfig(
        bot_token=os.getenv("SLACKBOT_USER_OAUTH_TOKEN"),
        signing_secret=os.getenv("SLACK_SIGNING_SECRET") or None,
        host=os.getenv("SLACKQ_HOST", "0.0.0.0"),
        port=int(os.getenv("SLACKQ_PORT", "3000")),
    )

    store_config = StoreConfig()
    if os.getenv("SLACKQ_DB_PATH"):
        store_config.db_path = Path(os.environ["SLACKQ_DB_PATH"]).expanduser()
    if os.getenv("SLACKQ_LOG_DIR"):
        store_config.log_dir = Path(os.environ["SLACKQ_LOG_DIR"]).expanduser()

    return Settings(
        agent=agent_config,
        broker=broker_config,
        memory=memory_config,
        slack=slack_config,
        store=store_config,
        groq_api_key=os.getenv("GROQ_API_KEY"),
    )
