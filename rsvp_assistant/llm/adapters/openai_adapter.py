import logging
from typing import Type, TypeVar

from openai import AsyncOpenAI
from pydantic import BaseModel

from ..interface import LLMProvider

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class OpenAIAdapter(LLMProvider):
    """
    Structured output through the OpenAI chat completions `parse` helper.
    Refusals and unparsable answers raise ValueError; the classifier's
    caller treats any exception as "not understood".
    """

    def __init__(self, api_key: str, model_name: str = "gpt-4o", client: AsyncOpenAI | None = None):
        self.client = client or AsyncOpenAI(api_key=api_key)
        self.model_name = model_name

    async def complete_structured(
        self,
        system_prompt: str,
        user_text: str,
        response_model: Type[T],
        temperature: float = 0.0,
    ) -> T:
        completion = await self.client.chat.completions.parse(
            model=self.model_name,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_text},
            ],
            response_format=response_model,
            temperature=temperature,
        )
        if completion.usage is not None:
            logger.debug(
                f"{self.model_name} used {completion.usage.prompt_tokens} prompt / "
                f"{completion.usage.completion_tokens} completion tokens"
            )

        message = completion.choices[0].message
        if message.refusal:
            raise ValueError(f"Model refused to classify: {message.refusal}")
        if message.parsed is None:
            raise ValueError(f"Model returned no parsable {response_model.__name__}.")
        return message.parsed
