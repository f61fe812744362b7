"""Query pipeline: channel selection, history search, and orchestration."""

from .channels import ChannelSelector, NoChannelsError
from .history import HistorySearcher
from .orchestrator import NO_CHANNELS_RESPONSE, AgentConfig, QueryOrchestrator, QueryResult

__all__ = [
    "NO_CHANNELS_RESPONSE",
    "AgentConfig",
    "ChannelSelector",
    "HistorySearcher",
    "NoChannelsError",
    "QueryOrchestrator",
    "QueryResult",
]
