from __future__ import annotations

from aigit_core.errors import NoResponseError
from aigit_core.models import ProviderConfig
from aigit_core.providers.base import BaseProvider


class GeminiProvider(BaseProvider):
    NAME = "Gemini"
    MODEL = "gemini-1.5-flash"
    QUOTA_HINT = (
        "Please try again later or check your Gemini API quota at https://ai.google.dev/gemini-api/docs/rate-limits"
    )

    def __init__(self, config: ProviderConfig):
        super().__init__(config)
        try:
            import google.generativeai as genai
            from google.generativeai.types import HarmBlockThreshold, HarmCategory
        except ImportError:
            raise ImportError(
                "The 'google-generativeai' package is required for this provider. "
                "Install it with: pip install google-generativeai"
            )
        genai.configure(api_key=config.api_key)
        # Diffs routinely contain exploit strings and credentials-looking test
        # data; the default thresholds block too many code reviews.
        self.client = genai.GenerativeModel(
            self.model,
            generation_config=genai.GenerationConfig(
                temperature=config.temperature,
                max_output_tokens=config.max_tokens,
            ),
            safety_settings={
                HarmCategory.HARM_CATEGORY_HARASSMENT: HarmBlockThreshold.BLOCK_ONLY_HIGH,
                HarmCategory.HARM_CATEGORY_HATE_SPEECH: HarmBlockThreshold.BLOCK_ONLY_HIGH,
                HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT: HarmBlockThreshold.BLOCK_ONLY_HIGH,
            },
        )

    def _call_api(self, prompt: str, timeout: float | None) -> str:
        request_options = {"timeout": timeout} if timeout is not None else None
        response = self.client.generate_content(prompt, request_options=request_options)
        if not response.candidates:
            raise NoResponseError("no response from Gemini")
        return extract_text(response.candidates[0])

    def _is_rate_limit(self, error: Exception) -> bool:
        from google.api_core.exceptions import ResourceExhausted, TooManyRequests

        if isinstance(error, (ResourceExhausted, TooManyRequests)):
            return True
        return super()._is_rate_limit(error)


def extract_text(candidate) -> str:
    """Concatenate the text parts of one response candidate."""
    content = getattr(candidate, "content", None)
    if content is None:
        return ""
    return "".join(part.text for part in content.parts if getattr(part, "text", None))
