from .agent_protocol import NamingAgentProtocol
from .dictionary_agent import DictionaryAgent
from .naming_agent import NamingAgent
