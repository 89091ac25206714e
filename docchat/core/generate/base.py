from abc import ABC, abstractmethod

class CompletionService(ABC):
    @abstractmethod
    def complete(self, system_instruction: str, user_query: str) -> str:
        """Returns the generated answer text for one system + user turn."""
        pass
