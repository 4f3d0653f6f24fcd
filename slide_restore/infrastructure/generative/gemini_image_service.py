# slide_restore/infrastructure/generative/gemini_image_service.py
"""
Generative image model backed by Google Gemini (google-genai SDK).
"""
import base64
from typing import Any, Callable, Optional

from google import genai
from google.genai import types

from slide_restore.domain.common.errors import ExternalCallError
from slide_restore.domain.common.result import Result
from slide_restore.domain.models.restore_model import ModelRequest, ModelResponse
from slide_restore.domain.services.i_config_repository_service import IConfigRepository
from slide_restore.domain.services.i_generative_image_service import IGenerativeImageService
from slide_restore.domain.services.i_key_storage_service import IKeyStorage
from slide_restore.domain.services.i_logger_service import ILoggerService


def extract_image(response: Any) -> ModelResponse:
    """
    Pull the first inline image out of a generate_content response.

    Nothing beyond "first candidate, first part carrying inline data" is
    assumed about the response shape.
    """
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return ModelResponse.without_image("response has no candidates")

    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) or []
    for part in parts:
        inline = getattr(part, "inline_data", None)
        data = getattr(inline, "data", None)
        if not data:
            continue
        if isinstance(data, str):
            data = base64.b64decode(data)
        return ModelResponse.with_image(data)

    finish_reason = getattr(candidates[0], "finish_reason", None)
    return ModelResponse.without_image(f"no image part in response (finish_reason={finish_reason})")


class GeminiImageService(IGenerativeImageService):
    """
    Sends the source image and instructions to Gemini and returns the
    generated image bytes. No retries are performed.
    """

    def __init__(self, key_storage: IKeyStorage, config_repository: IConfigRepository,
                 logger: ILoggerService,
                 client_factory: Optional[Callable[[str], Any]] = None):
        """
        Initialize the service.

        Args:
            key_storage: Source of the API key (read on every call)
            config_repository: Model name and thinking budget
            logger: Logger service
            client_factory: Builds a client from an API key (defaults to genai.Client)
        """
        self.key_storage = key_storage
        self.config_repository = config_repository
        self.logger = logger
        self.client_factory = client_factory or (lambda api_key: genai.Client(api_key=api_key))

    def _build_config(self, request: ModelRequest) -> types.GenerateContentConfig:
        budget = self.config_repository.get_thinking_budget()
        return types.GenerateContentConfig(
            thinking_config=types.ThinkingConfig(thinking_budget=budget) if budget > 0 else None,
            image_config=types.ImageConfig(
                image_size=request.quality_tier.value,
                aspect_ratio=request.aspect_ratio,
            ),
        )

    def generate(self, request: ModelRequest) -> Result[ModelResponse]:
        api_key = self.key_storage.get()
        if not api_key:
            return Result.fail(ExternalCallError(message="No API key configured"))

        model_name = self.config_repository.get_model_name()
        self.logger.info("Calling generative model", model=model_name,
                         tier=request.quality_tier.value, aspect=request.aspect_ratio)

        try:
            client = self.client_factory(api_key)
            response = client.models.generate_content(
                model=model_name,
                contents=[
                    types.Part.from_bytes(data=request.image_png, mime_type="image/png"),
                    request.prompt,
                ],
                config=self._build_config(request),
            )
        except Exception as e:
            # SDK, transport and auth failures all end up here
            error = ExternalCallError(
                message=f"Model call failed: {e}",
                details={"model": model_name, "tier": request.quality_tier.value},
                inner_error=e
            )
            self.logger.error(str(error))
            return Result.fail(error)

        model_response = extract_image(response)
        if model_response.has_image:
            self.logger.debug(f"Model returned {len(model_response.image)} image bytes")
        else:
            self.logger.warning("Model returned no image", reason=model_response.reason)
        return Result.ok(model_response)
