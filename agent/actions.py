"""
Actions - the entry points the API server (and the studio session) call.

Every action follows the same contract:
1. Check required inputs are present. If not, return an error result
   without touching the remote client.
2. Run the matching skill.
3. Return the success payload, or a classified, fixed error sentence.
   Raw exception detail only goes to the log.

Actions hold no state between calls; everything they need comes in through
the request and the ActionContext.
"""

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from config import GenerationSettings, load_settings
from agent.errors import ValidationError, classify_exception, user_message
from agent.gemini_client import GeminiClient
from models.capability import Capability
from models.requests import (
    CustomizePoemInput,
    GenerateImageInput,
    GeneratePoemInput,
    GenerateVideoInput,
    TestVoiceInput,
    TestVoicesInput,
    TextToSpeechInput,
)
from models.results import (
    GenerationResult,
    ImageResult,
    PoemResult,
    RevisionResult,
    SpeechResult,
    VideoResult,
    VoiceTestResult,
)
from skills import (
    ImageGenerator,
    PoemGenerator,
    PoemReviser,
    TTSGenerator,
    VideoGenerator,
    VoiceProbe,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActionContext:
    """Settings and remote client shared (read-only) by every action."""

    settings: GenerationSettings
    client: GeminiClient = field(repr=False)

    @classmethod
    def create(cls, settings: GenerationSettings = None, sdk_client=None) -> "ActionContext":
        settings = settings or load_settings()
        return cls(settings=settings, client=GeminiClient(settings, sdk_client=sdk_client))


async def _run(
    capability: Capability,
    result_type: type[GenerationResult],
    work: Callable[[], Awaitable],
) -> GenerationResult:
    """Run one action body and turn its outcome into a result."""
    try:
        value = await work()
    except ValidationError as e:
        logger.info(f"[Actions] {capability.value}: rejected input: {e}")
        return result_type.failure(str(e))
    except Exception as e:
        category = classify_exception(e)
        logger.error(
            f"[Actions] {capability.value} failed ({category.value}): {e}",
            exc_info=True,
        )
        return result_type.failure(user_message(category, capability))
    return result_type.success(value)


# =============================================================================
# Entry points
# =============================================================================


async def generate_poem_action(request: GeneratePoemInput, context: ActionContext) -> PoemResult:
    if not request.photo_data_uri:
        return PoemResult.failure("Photo data is missing.")

    async def work():
        record = await PoemGenerator(context.client, context.settings).generate(request)
        return record.text

    return await _run(Capability.POEM, PoemResult, work)


async def customize_poem_action(request: CustomizePoemInput, context: ActionContext) -> RevisionResult:
    if not request.original_poem or not request.tone:
        return RevisionResult.failure("Original poem or new tone is missing.")

    async def work():
        return await PoemReviser(context.client, context.settings).generate(request)

    return await _run(Capability.REVISION, RevisionResult, work)


async def text_to_speech_action(request: TextToSpeechInput, context: ActionContext) -> SpeechResult:
    if not request.text:
        return SpeechResult.failure("Text to speak is missing.")

    async def work():
        result = await TTSGenerator(context.client, context.settings).generate(request)
        return result.audio_data_uri

    return await _run(Capability.AUDIO, SpeechResult, work)


async def generate_image_action(request: GenerateImageInput, context: ActionContext) -> ImageResult:
    has_synthesis_input = bool(request.prompt and request.photo_data_uris)
    has_artwork_input = bool(request.poem and request.photo_data_uri)
    if not (has_synthesis_input or has_artwork_input):
        return ImageResult.failure("Required image data or prompt is missing.")

    async def work():
        image = await ImageGenerator(context.client, context.settings).generate(request)
        return image.data_uri

    return await _run(Capability.IMAGE, ImageResult, work)


async def generate_video_action(request: GenerateVideoInput, context: ActionContext) -> VideoResult:
    if not request.photo_data_uri:
        return VideoResult.failure("Photo data is missing.")

    async def work():
        clip = await VideoGenerator(context.client, context.settings).generate(request)
        return clip.video_data_uri

    return await _run(Capability.VIDEO, VideoResult, work)


async def test_voice_action(request: TestVoiceInput, context: ActionContext) -> VoiceTestResult:
    if not request.voice_name:
        return VoiceTestResult.failure("Voice name is missing.")

    async def work():
        return await VoiceProbe(context.client, context.settings).probe(request)

    result = await _run(Capability.VOICE_TEST, VoiceTestResult, work)
    result.voice_name = request.voice_name
    return result


async def test_voices_action(request: TestVoicesInput, context: ActionContext) -> list[VoiceTestResult]:
    """Probe several voices; each gets its own result, failures stay per voice."""
    probe = VoiceProbe(context.client, context.settings)
    return await probe.probe_many(request.voice_names, request.text)


# pytest would otherwise collect the two probe actions as tests
test_voice_action.__test__ = False
test_voices_action.__test__ = False


# =============================================================================
# Dispatch
# =============================================================================

ACTIONS = {
    Capability.POEM: generate_poem_action,
    Capability.REVISION: customize_poem_action,
    Capability.AUDIO: text_to_speech_action,
    Capability.IMAGE: generate_image_action,
    Capability.VIDEO: generate_video_action,
    Capability.VOICE_TEST: test_voice_action,
}

_unhandled = set(Capability) - set(ACTIONS)
if _unhandled:
    raise RuntimeError(f"No action registered for: {sorted(c.value for c in _unhandled)}")


async def dispatch_action(request, context: ActionContext) -> GenerationResult:
    """Route a tagged GenerationRequest to its action."""
    action = ACTIONS[Capability(request.capability)]
    return await action(request, context)
