"""SlackQ entry point."""

import asyncio
import logging
import sys

from dotenv import find_dotenv, load_dotenv

from .cli import run_cli

logger = logging.getLogger(__name__)


def serve() -> None:
    """Run the Slack Events API server (blocking)."""
    import uvicorn
    from slack_sdk.web.async_client import AsyncWebClient

    from .assistant import build_assistant
    from .config import config_from_env
    from .slack.ingress import SlackEventHandler, create_app

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    settings = config_from_env()
    if not settings.slack.bot_token:
        raise ValueError("SLACKBOT_USER_OAUTH_TOKEN not set")

    assistant = build_assistant(settings)
    handler = SlackEventHandler(
        assistant.orchestrator,
        AsyncWebClient(token=settings.slack.bot_token),
    )
    app = create_app(
        handler,
        signing_secret=settings.slack.signing_secret,
        on_shutdown=assistant.aclose,
    )

    logger.info(f"Starting Slack ingress on {settings.slack.host}:{settings.slack.port}")
    uvicorn.run(app, host=settings.slack.host, port=settings.slack.port)


def main() -> None:
    """Main entry point."""
    load_dotenv(find_dotenv(usecwd=True))

    if len(sys.argv) > 1:
        command = sys.argv[1]

        if command == "serve":
            serve()
            return

        print(f"Unknown command: {command}. Use 'serve' or no arguments for the REPL.")
        sys.exit(2)

    asyncio.run(run_cli())


if __name__ == "__main__":
    main()
