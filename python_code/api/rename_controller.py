import logging

from agents import NamingAgent, NamingAgentProtocol
from renaming import RenameConfig, RenameError, Registry, visit_all_identifiers

logger = logging.getLogger(__name__)


class RenameController():
    def __init__(self, naming_agent: NamingAgentProtocol = None, config: RenameConfig = None):
        self.naming_agent = naming_agent or NamingAgent()
        self.config = config or RenameConfig.from_env()

    async def get_response(self, request_payload, on_progress=None):
        # Extract User Input
        payload_input = request_payload["input"]
        source_code = payload_input["code"]
        parallel = bool(payload_input.get("parallel", self.config.parallel))

        config = RenameConfig(
            context_window=self.config.context_window,
            max_batch=self.config.max_batch,
            parallelism=self.config.parallelism,
            parallel=parallel,
        )

        # Rename every binding with the naming agent as oracle
        registry = Registry()
        try:
            renamed_code = await visit_all_identifiers(
                source_code,
                self.naming_agent.get_response,
                on_progress=on_progress,
                config=config,
                registry=registry,
            )
        except RenameError as exc:
            logger.error("rename failed: %s", exc)
            return {"error": str(exc), "error_type": type(exc).__name__}

        return {"code": renamed_code, "renames": registry.renames}
