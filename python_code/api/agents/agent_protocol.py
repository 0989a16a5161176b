from typing import Protocol

class NamingAgentProtocol(Protocol):
    def get_response(self, current_name: str, surrounding_code: str) -> str:
        ...
