# slide_restore/infrastructure/restore/restore_service.py
"""
Implementation of the restore service.

Coordinates instruction building, the generative model call and pixel
compositing. Any failure after validation is reported as a single
RestoreFailedError; no partial result is ever returned.
"""
import io
from typing import Dict, List, Optional, Sequence

from PIL import Image

from slide_restore.domain.common.errors import (
    DomainError, EmptyInstructionError, ExternalCallError, MalformedResponseError, ResourceError,
    RestoreFailedError
)
from slide_restore.domain.common.result import Result
from slide_restore.domain.editing.geometry import aspect_ratio_hint, normalize
from slide_restore.domain.models.region_model import Region
from slide_restore.domain.models.restore_model import ModelRequest, QualityTier, RestoreOutcome
from slide_restore.domain.services.i_compositor_service import ICompositorService
from slide_restore.domain.services.i_generative_image_service import IGenerativeImageService
from slide_restore.domain.services.i_logger_service import ILoggerService
from slide_restore.domain.services.i_restore_service import IRestoreService, ProgressCallback

PROMPT_HEADER = """TASK: ULTRA-HD TYPOGRAPHY RESTORATION & SELF-CHECK
You are a top-tier vector font artist. Restore the text perfectly. Maintain original layout and font weight.

CRITICAL INSTRUCTIONS:
1. ONLY modify pixels within the boxes.
2. [SELF-CHECK]: Before final output, ensure all characters are sharp, correctly spelled, and legible.
3. DO NOT smooth or change any pixels outside the specified boxes.
4. If a box contains a speech bubble or specific colored background, match the original style exactly.

Box coordinates are on a 0-1000 grid relative to the image width and height.

TARGET AREAS:
"""


def regions_with_text(regions: Sequence[Region], replacements: Dict[int, str]) -> List[Region]:
    """Regions whose replacement text is not blank, in display order."""
    return [region for region in regions if replacements.get(region.id, "").strip()]


def format_area_instructions(regions: Sequence[Region], replacements: Dict[int, str],
                             image_width: int, image_height: int) -> str:
    """One "[AREA n]" line per region, numbered within the given sequence."""
    lines = []
    for number, region in enumerate(regions, start=1):
        nx, ny, nw, nh = normalize(region, image_width, image_height)
        text = replacements.get(region.id, "")
        lines.append(f'[AREA {number}]: X={nx}, Y={ny}, W={nw}, H={nh}, TEXT="{text}"')
    return "\n".join(lines)


def build_prompt(area_instructions: str) -> str:
    return PROMPT_HEADER + area_instructions


class RestoreService(IRestoreService):
    """Restore orchestrator. Performs no retries; callers may re-invoke."""

    def __init__(self, generative_service: IGenerativeImageService,
                 compositor: ICompositorService,
                 logger: ILoggerService):
        self.generative_service = generative_service
        self.compositor = compositor
        self.logger = logger

    def restore(self, source: Image.Image, regions: Sequence[Region],
                replacements: Dict[int, str], quality_tier: QualityTier,
                on_progress: Optional[ProgressCallback] = None) -> Result[RestoreOutcome]:
        report = on_progress or (lambda percent, message: None)

        targets = regions_with_text(regions, replacements)
        if not targets:
            self.logger.info("Restore rejected: no region has replacement text", regions=len(regions))
            return Result.fail(EmptyInstructionError())

        report(10, "Analysing and rendering text...")
        encoded = Result.from_operation(
            lambda: self._encode_png(source), self.logger, ResourceError,
            "Could not encode source image", size=f"{source.width}x{source.height}"
        )
        if encoded.is_failure:
            return self._failed(encoded.error)

        request = ModelRequest(
            image_png=encoded.value,
            prompt=build_prompt(format_area_instructions(targets, replacements, source.width, source.height)),
            quality_tier=quality_tier,
            aspect_ratio=aspect_ratio_hint(source.width, source.height),
        )
        self.logger.info("Starting restore", regions=len(targets), tier=quality_tier.value)

        response_result = self.generative_service.generate(request)
        if response_result.is_failure:
            return self._failed(self._as_external(response_result.error))

        response = response_result.value
        if not response.has_image:
            return self._failed(MalformedResponseError(
                message=response.reason or "Model response contained no image"
            ))

        try:
            model_image = Image.open(io.BytesIO(response.image))
            model_image.load()
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            return self._failed(MalformedResponseError(
                message=f"Model image could not be decoded: {e}",
                details={"bytes": len(response.image)},
                inner_error=e
            ))

        report(70, "Self-checking quality and compositing pixels...")
        composited = Result.from_operation(
            lambda: self.compositor.composite(source, model_image, targets), self.logger,
            MalformedResponseError, "Model image could not be composited",
            model_size=f"{model_image.width}x{model_image.height}"
        )
        if composited.is_failure:
            return self._failed(composited.error)

        report(100, "Restore complete")
        self.logger.info("Restore finished", regions=len(targets),
                         model_size=f"{model_image.width}x{model_image.height}")
        return Result.ok(RestoreOutcome(
            image=composited.value,
            regions_applied=tuple(region.copy() for region in targets),
            quality_tier=quality_tier,
        ))

    def _encode_png(self, image: Image.Image) -> bytes:
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()

    def _as_external(self, error: DomainError) -> DomainError:
        if isinstance(error, (ExternalCallError, MalformedResponseError)):
            return error
        return ExternalCallError(message=error.message, details=error.details, inner_error=error.inner_error)

    def _failed(self, cause: DomainError) -> Result[RestoreOutcome]:
        error = RestoreFailedError(cause)
        self.logger.error(str(error), cause=cause.code, reason=cause.message)
        return Result.fail(error)
