"""Interactive command-line interface for SlackQ."""

import asyncio
import uuid

from .assistant import Assistant, build_assistant
from .config import Settings, config_from_env
from .logging import get_logger

BANNER = """
╔══════════════════════════════════════════╗
║              SlackQ v0.1.0               ║
║    Search your Slack history by asking   ║
╚══════════════════════════════════════════╝

Commands:
  /exit, /quit  - Exit the CLI
  /help         - Show this help
  ~help         - Thread commands (~thread -c | -l | -s <id>)

Try:
  Find discussions about the quarterly planning meeting
  Search for messages about API integration issues in the #engineering channel
"""


class CLI:
    """REPL that sends each line to the query orchestrator."""

    def __init__(
        self,
        settings: Settings | None = None,
        assistant: Assistant | None = None,
        user_id: str | None = None,
    ) -> None:
        self.settings = settings or config_from_env()
        self.assistant = assistant or build_assistant(self.settings)
        self.user_id = user_id or self.settings.agent.default_user_id
        self.session_id = self._new_session_id()
        self.logger = get_logger()

    def _new_session_id(self) -> str:
        """Generate a new session ID for log correlation."""
        return f"cli-{uuid.uuid4().hex[:8]}"

    def _format_response(self, response: str) -> str:
        """Format an answer for display."""
        return "\n".join(["\n" + "─" * 40, response, "─" * 40])

    async def _process_message(self, message: str) -> str:
        """Send a message through the orchestrator and return what was shown."""
        try:
            response = await self.assistant.orchestrator.handle(message, user_id=self.user_id)
        except Exception as e:
            error_msg = f"Error: {e}"
            print(f"\n❌ {error_msg}")
            self.logger.log("error", user_id=self.user_id, error=str(e), session_id=self.session_id)
            return error_msg

        output = self._format_response(response)
        print(output)
        return output

    async def _handle_command(self, command: str) -> bool:
        """Handle a REPL command. Returns True if should continue, False to exit."""
        cmd = command.lower().strip()

        if cmd in ("/exit", "/quit", "exit", "quit"):
            print("\n👋 Goodbye!")
            self.logger.log("session_end", user_id=self.user_id, session_id=self.session_id)
            return False

        if cmd == "/help":
            print(BANNER)
            return True

        return True  # Unknown command, continue

    async def run(self) -> None:
        """Run the interactive CLI."""
        print(BANNER)
        print(f"User: {self.user_id}  Session: {self.session_id}\n")
        self.logger.log("session_start", user_id=self.user_id, session_id=self.session_id)

        try:
            while True:
                try:
                    user_input = (await asyncio.to_thread(input, "you> ")).strip()
                except EOFError:
                    await self._handle_command("/exit")
                    break

                if not user_input:
                    continue

                if user_input.startswith("/") or user_input.lower() in ("exit", "quit"):
                    if not await self._handle_command(user_input):
                        break
                    continue

                await self._process_message(user_input)
        except (KeyboardInterrupt, asyncio.CancelledError):
            print("\n👋 Goodbye!")
        finally:
            await self.assistant.aclose()


async def run_cli() -> None:
    """Entry point for the CLI."""
    cli = CLI()
    await cli.run()
