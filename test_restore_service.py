import io

import pytest
from PIL import Image

from conftest import gradient_image, png_bytes
from slide_restore.domain.common.errors import (
    EmptyInstructionError, ExternalCallError, MalformedResponseError, ResourceError, RestoreFailedError
)
from slide_restore.domain.common.result import Result
from slide_restore.domain.models.region_model import Region
from slide_restore.domain.models.restore_model import ModelResponse, QualityTier
from slide_restore.domain.services.i_compositor_service import ICompositorService
from slide_restore.domain.services.i_generative_image_service import IGenerativeImageService
from slide_restore.infrastructure.imaging.compositor_service import PillowCompositorService, changed_mask
from slide_restore.infrastructure.restore.restore_service import (
    PROMPT_HEADER, RestoreService, format_area_instructions, regions_with_text
)


class FakeGenerativeService(IGenerativeImageService):
    def __init__(self, result):
        self.result = result
        self.requests = []

    def generate(self, request):
        self.requests.append(request)
        return self.result


def ok_image(size=(160, 120), color=(0, 0, 0)):
    return Result.ok(ModelResponse.with_image(png_bytes(Image.new("RGB", size, color))))


@pytest.fixture
def source():
    return gradient_image(80, 60)


def make_service(logger, result):
    generative = FakeGenerativeService(result)
    return RestoreService(generative, PillowCompositorService(logger), logger), generative


def test_no_text_fails_before_any_call(logger, source):
    service, generative = make_service(logger, ok_image())
    regions = [Region(1, 0, 0, 10, 10)]

    result = service.restore(source, regions, {1: "   "}, QualityTier.ONE_K)

    assert result.is_failure
    assert isinstance(result.error, EmptyInstructionError)
    assert generative.requests == []


def test_regions_without_text_are_never_sent():
    regions = [Region(1, 0, 0, 10, 10), Region(2, 10, 10, 0, 0), Region(3, 5, 5, 5, 5)]
    assert [r.id for r in regions_with_text(regions, {2: "zero area", 3: ""})] == [2]


def test_area_instruction_format():
    regions = [Region(4, 80, 60, 160, 120), Region(9, 0, 0, 400, 300)]
    text = format_area_instructions(regions, {4: "Hello", 9: "World"}, 800, 600)

    assert text.splitlines() == [
        '[AREA 1]: X=100, Y=100, W=200, H=200, TEXT="Hello"',
        '[AREA 2]: X=0, Y=0, W=500, H=500, TEXT="World"',
    ]


def test_request_contents(logger, source):
    service, generative = make_service(logger, ok_image())
    regions = [Region(1, 0, 0, 8, 6), Region(2, 40, 30, 8, 6)]

    result = service.restore(source, regions, {2: "Title"}, QualityTier.FOUR_K)

    assert result.is_success
    request = generative.requests[0]
    assert request.quality_tier is QualityTier.FOUR_K
    assert request.aspect_ratio == "16:9"
    assert request.prompt.startswith(PROMPT_HEADER)
    assert request.prompt.endswith('[AREA 1]: X=500, Y=500, W=100, H=100, TEXT="Title"')
    assert Image.open(io.BytesIO(request.image_png)).size == (80, 60)


def test_success_composites_only_regions_with_text(logger, source):
    service, _ = make_service(logger, ok_image(size=(200, 90)))
    regions = [Region(1, 0, 0, 20, 20), Region(2, 40, 30, 20, 20)]

    result = service.restore(source, regions, {2: "New"}, QualityTier.TWO_K)

    outcome = result.value
    assert outcome.image.size == source.size
    assert outcome.region_count == 1
    assert outcome.quality_tier is QualityTier.TWO_K
    changed = changed_mask(source, outcome.image)
    assert not changed[0:20, 0:20].any()
    assert changed[30:50, 40:60].any()
    changed[30:50, 40:60] = False
    assert not changed.any()


def test_zero_area_region_with_text_is_still_sent(logger, source):
    service, generative = make_service(logger, ok_image())

    result = service.restore(source, [Region(1, 10, 10, 0, 0)], {1: "dot"}, QualityTier.ONE_K)

    assert result.is_success
    assert len(generative.requests) == 1
    assert not changed_mask(source, result.value.image).any()


def test_external_failure_becomes_restore_failed(logger, source):
    service, _ = make_service(logger, Result.fail(ExternalCallError(message="quota exceeded")))

    result = service.restore(source, [Region(1, 0, 0, 5, 5)], {1: "x"}, QualityTier.ONE_K)

    assert isinstance(result.error, RestoreFailedError)
    assert isinstance(result.error.cause, ExternalCallError)
    assert result.error.details["reason"] == "quota exceeded"
    assert logger.messages("ERROR")


def test_unknown_failure_is_wrapped_as_external(logger, source):
    service, _ = make_service(logger, Result.fail("connection reset"))

    result = service.restore(source, [Region(1, 0, 0, 5, 5)], {1: "x"}, QualityTier.ONE_K)

    assert isinstance(result.error.cause, ExternalCallError)


def test_missing_image_is_malformed(logger, source):
    service, _ = make_service(logger, Result.ok(ModelResponse.without_image("SAFETY")))

    result = service.restore(source, [Region(1, 0, 0, 5, 5)], {1: "x"}, QualityTier.ONE_K)

    assert isinstance(result.error, RestoreFailedError)
    assert isinstance(result.error.cause, MalformedResponseError)


def test_undecodable_image_is_malformed(logger, source):
    service, _ = make_service(logger, Result.ok(ModelResponse.with_image(b"not a png")))

    result = service.restore(source, [Region(1, 0, 0, 5, 5)], {1: "x"}, QualityTier.ONE_K)

    assert isinstance(result.error.cause, MalformedResponseError)


def test_progress_is_reported(logger, source):
    service, _ = make_service(logger, ok_image())
    progress = []

    service.restore(source, [Region(1, 0, 0, 5, 5)], {1: "x"}, QualityTier.ONE_K,
                    on_progress=lambda percent, message: progress.append(percent))

    assert progress == [10, 70, 100]


class BrokenCompositor(ICompositorService):
    def composite(self, source, model_image, regions):
        raise RuntimeError("paste failed")


def test_compositing_error_becomes_restore_failed(logger, source):
    generative = FakeGenerativeService(ok_image())
    service = RestoreService(generative, BrokenCompositor(), logger)

    result = service.restore(source, [Region(1, 0, 0, 5, 5)], {1: "x"}, QualityTier.ONE_K)

    assert isinstance(result.error, RestoreFailedError)
    assert isinstance(result.error.cause, MalformedResponseError)
    assert isinstance(result.error.cause.inner_error, RuntimeError)


def test_unencodable_source_fails_before_any_call(logger):
    service, generative = make_service(logger, ok_image())
    cmyk_source = Image.new("CMYK", (40, 30))

    result = service.restore(cmyk_source, [Region(1, 0, 0, 5, 5)], {1: "x"}, QualityTier.ONE_K)

    assert isinstance(result.error, RestoreFailedError)
    assert isinstance(result.error.cause, ResourceError)
    assert generative.requests == []
