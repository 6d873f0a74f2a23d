from abc import ABC, abstractmethod
from typing import Type, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


class LLMProvider(ABC):
    """
    A chat model that can answer one user utterance under a system prompt
    with an instance of a given pydantic model.
    """

    @abstractmethod
    async def complete_structured(
        self,
        system_prompt: str,
        user_text: str,
        response_model: Type[T],
        temperature: float = 0.0,
    ) -> T:
        """
        Raises if the model gives no answer that validates as `response_model`.
        """
        pass
