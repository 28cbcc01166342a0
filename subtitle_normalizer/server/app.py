"""FastAPI application exposing the normalization stages over HTTP.

WHY: Editor front ends and automation tools (n8n, scripts) need the
stages without embedding Python. FastAPI provides request validation and
automatic OpenAPI documentation.

HOW: Each stage gets one POST endpoint taking captions plus options and
returning JSON. Stages that need tokens receive the MeCab Token Source
through a FastAPI dependency, created once per process on first use.
The user dictionary, when SUBTITLE_DICTIONARY_PATH is set, is loaded the
same way.

RULES:
- All endpoints have OpenAPI descriptions and use the shared ErrorResponse
- ValueError from a stage → 422; tokenizer unavailable → 503
- Endpoints never mutate request data; responses are fresh models
- Python 3.9+ compatible (no match/case, no PEP 604 unions)
"""

from __future__ import annotations

import functools
import logging
from typing import Annotated, Callable, List, Optional

from fastapi import Depends, FastAPI, HTTPException

from subtitle_normalizer import __version__, config
from subtitle_normalizer.adapters.mecab_tokenizer import MeCabTokenSource, TokenizerUnavailableError
from subtitle_normalizer.core import pipeline
from subtitle_normalizer.core.models import (
    HonorificOptions,
    MisconversionOptions,
    PauseThreshold,
    PunctuationOptions,
    SegmenterOptions,
    SentenceStyle,
    SpeechStyleOptions,
)
from subtitle_normalizer.core.review import review_transcription
from subtitle_normalizer.core.segmenter import split_by_pause, split_by_topic_change
from subtitle_normalizer.core.tokens import TokenSource
from subtitle_normalizer.dictionary import UserDictionary
from subtitle_normalizer.formatters import FORMATTERS
from subtitle_normalizer.formatters.base import Document
from subtitle_normalizer.server.models import (
    CandidateModel,
    CaptionModel,
    CaptionsRequest,
    CaptionsResponse,
    ErrorResponse,
    FormatInfo,
    HealthResponse,
    HonorificRequest,
    MisconversionRequest,
    MisconversionResponse,
    PunctuateRequest,
    ReviewModel,
    ReviewResponse,
    SegmentModel,
    SegmentRequest,
    SegmentStrategy,
    SegmentsResponse,
    SpeechStyleRequest,
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Subtitle Normalizer API",
    description=(
        "Punctuation completion, register conversion, misconversion "
        "detection and segmentation for Japanese speech-recognition captions."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

_TOKENIZER_ERROR = {503: {"model": ErrorResponse, "description": "Morphological analyzer unavailable"}}
_VALIDATION_ERROR = {422: {"model": ErrorResponse, "description": "Invalid options"}}


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=1)
def _mecab() -> MeCabTokenSource:
    return MeCabTokenSource(config.MECAB_ARGS)


def get_token_source() -> TokenSource:
    """Shared MeCab Token Source; 503 when MeCab cannot be started."""
    try:
        return _mecab()
    except TokenizerUnavailableError as exc:
        logger.error("Tokenizer unavailable: %s", exc)
        raise HTTPException(status_code=503, detail=str(exc))


@functools.lru_cache(maxsize=1)
def get_dictionary() -> Optional[UserDictionary]:
    if not config.DICTIONARY_PATH:
        return None
    return UserDictionary.load(config.DICTIONARY_PATH)


def get_token_provider() -> Callable[[], TokenSource]:
    """Hand endpoints a callable so MeCab only starts when a request needs it."""
    return get_token_source


TokenProviderDep = Annotated[Callable[[], TokenSource], Depends(get_token_provider)]
DictionaryDep = Annotated[Optional[UserDictionary], Depends(get_dictionary)]


def _captions_response(captions) -> CaptionsResponse:
    return CaptionsResponse(captions=[CaptionModel.from_caption(c) for c in captions])


# ---------------------------------------------------------------------------
# Endpoints: Text stages
# ---------------------------------------------------------------------------


@app.post(
    "/punctuate",
    response_model=CaptionsResponse,
    tags=["punctuation"],
    summary="Complete punctuation",
    description=(
        "Insert 。 and 、 using pause and word timing where present, then "
        "length and grammar heuristics."
    ),
)
async def punctuate(request: PunctuateRequest) -> CaptionsResponse:
    options = PunctuationOptions(
        max_sentence_length=request.max_sentence_length,
        min_comma_interval=request.min_comma_interval,
        adjust_spacing=request.adjust_spacing,
        pause_threshold=PauseThreshold(period=request.pause_period, comma=request.pause_comma),
    )
    return _captions_response(pipeline.punctuate_captions(request.to_captions(), options))


@app.post(
    "/style/honorific",
    response_model=CaptionsResponse,
    tags=["style"],
    summary="Convert plain/polite register",
    description="Rewrite sentence endings to 常体 (plain) or 敬体 (polite).",
    responses=_VALIDATION_ERROR,
)
async def convert_honorific(request: HonorificRequest) -> CaptionsResponse:
    options = HonorificOptions(
        target_style=SentenceStyle(request.target_style.value),
        preserve_expressions=tuple(request.preserve_expressions),
        preserve_quotations=request.preserve_quotations,
    )
    try:
        captions = pipeline.convert_captions_honorific(request.to_captions(), options)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return _captions_response(captions)


@app.post(
    "/style/speech",
    response_model=CaptionsResponse,
    tags=["style"],
    summary="Convert speech level",
    description="Rewrite verbs and connectives to humble, polite, respectful or casual speech.",
    responses=_VALIDATION_ERROR,
)
async def convert_speech(request: SpeechStyleRequest) -> CaptionsResponse:
    options = SpeechStyleOptions(
        target_level=request.target_level,
        formality_level=request.formality_level,
        preserve_expressions=tuple(request.preserve_expressions),
        preserve_quotations=request.preserve_quotations,
    )
    try:
        captions = pipeline.convert_captions_speech_style(request.to_captions(), options)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return _captions_response(captions)


# ---------------------------------------------------------------------------
# Endpoints: Analysis
# ---------------------------------------------------------------------------


@app.post(
    "/misconversions",
    response_model=MisconversionResponse,
    tags=["analysis"],
    summary="Detect probable misconversions",
    description="Flag tokens that were probably mis-transcribed, with a confidence score.",
    responses=_TOKENIZER_ERROR,
)
async def misconversions(
    request: MisconversionRequest,
    token_provider: TokenProviderDep,
    dictionary: DictionaryDep,
) -> MisconversionResponse:
    token_source = token_provider()
    options = MisconversionOptions(
        check_kana=request.check_kana,
        check_kanji=request.check_kanji,
        min_confidence=request.min_confidence,
        use_custom_dictionary=request.use_custom_dictionary,
    )
    try:
        found = await pipeline.detect_caption_misconversions(
            request.to_captions(), token_source, options, dictionary
        )
    except TokenizerUnavailableError as exc:
        raise HTTPException(status_code=503, detail=str(exc))
    return MisconversionResponse(results={
        caption_id: [CandidateModel.from_candidate(c) for c in candidates]
        for caption_id, candidates in found.items()
    })


@app.post(
    "/segments",
    response_model=SegmentsResponse,
    tags=["analysis"],
    summary="Split captions into segments",
    description="Group captions at long pauses or at topic changes, within duration bounds.",
    responses={**_TOKENIZER_ERROR, **_VALIDATION_ERROR},
)
async def segments(
    request: SegmentRequest,
    token_provider: TokenProviderDep,
) -> SegmentsResponse:
    if request.min_segment_duration > request.max_segment_duration:
        raise HTTPException(
            status_code=422,
            detail="min_segment_duration must not exceed max_segment_duration",
        )
    options = SegmenterOptions(
        min_segment_duration=request.min_segment_duration,
        max_segment_duration=request.max_segment_duration,
        pause_threshold=request.pause_threshold,
        topic_similarity_threshold=request.topic_similarity_threshold,
        context_window_size=request.context_window_size,
    )
    captions = request.to_captions()
    if request.strategy is SegmentStrategy.topic:
        try:
            result = await split_by_topic_change(captions, token_provider(), options)
        except TokenizerUnavailableError as exc:
            raise HTTPException(status_code=503, detail=str(exc))
    else:
        result = split_by_pause(captions, options)
    return SegmentsResponse(segments=[SegmentModel.from_segment(s) for s in result])


@app.post(
    "/review",
    response_model=ReviewResponse,
    tags=["analysis"],
    summary="Review a transcription",
    description="Heuristic review: context breaks, grammar slips and filler words.",
)
async def review(request: CaptionsRequest) -> ReviewResponse:
    results = review_transcription(request.to_captions())
    return ReviewResponse(results=[ReviewModel.from_result(r) for r in results])


# ---------------------------------------------------------------------------
# Endpoints: Formats and health
# ---------------------------------------------------------------------------


@app.get(
    "/formats",
    response_model=List[FormatInfo],
    tags=["formats"],
    summary="List available output formats",
    description="Returns the output formats the CLI can write, with their file suffixes.",
)
async def list_formats() -> List[FormatInfo]:
    empty = Document(captions=[])
    result = []
    for key, formatter_cls in sorted(FORMATTERS.items()):
        formatter = formatter_cls()
        outputs = formatter.format(empty)
        result.append(FormatInfo(
            key=key,
            name=formatter.name,
            suffix=outputs[0].suffix if outputs else "",
        ))
    return result


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
    description="Liveness check for load balancers and orchestrators.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


def run_api():
    """Entry point for the subtitle-normalizer-api console script."""
    import uvicorn
    config.configure_logging()
    uvicorn.run(app, host="0.0.0.0", port=8000)
