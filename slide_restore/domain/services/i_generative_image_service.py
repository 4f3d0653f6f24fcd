# slide_restore/domain/services/i_generative_image_service.py
from abc import ABC, abstractmethod

from slide_restore.domain.common.result import Result
from slide_restore.domain.models.restore_model import ModelRequest, ModelResponse


class IGenerativeImageService(ABC):
    """External generative image model."""

    @abstractmethod
    def generate(self, request: ModelRequest) -> Result[ModelResponse]:
        """
        Submit a request and wait for the answer.

        Returns:
            Result containing the tagged model response, or an
            ExternalCallError when the call itself failed
        """
        pass
