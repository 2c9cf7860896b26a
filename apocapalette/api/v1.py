"""
Apocapalette v1 API Routes
Thin HTTP wrappers over the token, contrast, mood board and project services.
"""
import time
from typing import Any, Dict, List

import numpy as np
from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from apocapalette.schemas import (
    AutoTuneRequest,
    AutoTuneResponse,
    ContrastEnsureRequest,
    ContrastEnsureResponse,
    ErrorResponse,
    HarmonyRequest,
    HarmonyResponse,
    MoodBoardRequest,
    MoodBoardResponse,
    MoodClusterRequest,
    MoodClusterResponse,
    MoodRegenerateRequest,
    PaletteSocRequest,
    PresetRequest,
    ProjectMergeRequest,
    ProjectMergeResponse,
    ProjectSocRequest,
    TokenRequest,
    TokenResponse,
)
from apocapalette.services.colors.colorspace import InvalidColorInput, wcag_level
from apocapalette.services.colors.contrast import auto_tune_pair, enforce_contrast
from apocapalette.services.colors.harmony import create_harmony
from apocapalette.services.mood import (
    MoodCluster,
    create_mood_cluster,
    edit_slot_color,
    generate_mood_board,
    regenerate_mood_cluster,
    set_slot_locked,
)
from apocapalette.services.presets import crank_apocalypse, generate_random_palette
from apocapalette.services.project import generate_soc, merge_project_colors, process_colors
from apocapalette.services.tokens import build_ordered_stack, generate_tokens
from apocapalette.utils.ids import generate_request_id
from apocapalette.utils.logging import get_logger
from apocapalette.utils.metrics import get_metrics_instance

router = APIRouter(
    prefix="/v1",
    tags=["Token Core"],
    responses={
        400: {"model": ErrorResponse, "description": "Unknown mode, type or slot"},
        422: {"model": ErrorResponse, "description": "Malformed color or parameter"},
        500: {"model": ErrorResponse, "description": "Internal error"},
    },
)

SOC_MEDIA_TYPE = "application/xml"


def _to_http_error(request_id: str, endpoint: str, error: Exception) -> HTTPException:
    """Map a service exception to an HTTPException, counting and logging it."""
    metrics = get_metrics_instance()
    log = get_logger().request(request_id, endpoint).bind(error=str(error))
    if isinstance(error, InvalidColorInput):
        metrics.record_failure("invalid_color")
        log.info("Rejected malformed color")
        return HTTPException(status_code=422, detail=str(error))
    if isinstance(error, (ValueError, KeyError)):
        metrics.record_failure("bad_request")
        log.info("Rejected request")
        return HTTPException(status_code=400, detail=str(error))

    metrics.record_failure("internal_error")
    log.error("Unhandled error")
    return HTTPException(status_code=500, detail="Internal token core error")


def _finish(request_id: str, endpoint: str, start_time: float):
    elapsed_ms = (time.time() - start_time) * 1000
    get_metrics_instance().record_request(endpoint, elapsed_ms)
    get_logger().request(request_id, endpoint).bind(elapsed_ms=round(elapsed_ms, 2)).debug("Request served")


def _count_relaxed(clusters: List[MoodCluster]):
    get_metrics_instance().record_relaxed_slots(sum(slot.relaxed for cluster in clusters for slot in cluster.slots))


def _cluster_response(cluster: MoodCluster) -> MoodClusterResponse:
    return MoodClusterResponse(
        cluster=cluster.to_dict(),
        constraints_satisfied=cluster.constraints_satisfied,
    )


@router.post("/tokens",
            response_model=TokenResponse,
            summary="Generate Design Tokens",
            description="Synthesize the full token tree from one base color and the slider parameters")
async def create_tokens(request: TokenRequest) -> TokenResponse:
    start_time = time.time()
    request_id = generate_request_id("tok")

    try:
        params = request.to_parameters()
        tree = generate_tokens(params)
        response = TokenResponse(
            parameters=params.to_dict(),
            tokens=tree.to_dict(),
            swatches=[swatch.to_dict() for swatch in build_ordered_stack(tree)],
        )
        _finish(request_id, "tokens", start_time)
        return response

    except HTTPException:
        raise
    except Exception as e:
        raise _to_http_error(request_id, "tokens", e) from e


@router.post("/harmony",
            response_model=HarmonyResponse,
            summary="Harmony Hue Set",
            description="Ordered hue set for a color-wheel harmony rule")
async def create_harmony_set(request: HarmonyRequest) -> HarmonyResponse:
    start_time = time.time()
    request_id = generate_request_id("hue")

    try:
        hues = create_harmony(request.base, request.mode, request.reverse)
        _finish(request_id, "harmony", start_time)
        return HarmonyResponse(mode=request.mode, hues=hues)

    except HTTPException:
        raise
    except Exception as e:
        raise _to_http_error(request_id, "harmony", e) from e


@router.post("/contrast/ensure",
            response_model=ContrastEnsureResponse,
            summary="Ensure Contrast",
            description="Adjust the foreground lightness until it meets the target ratio")
async def ensure_contrast_endpoint(request: ContrastEnsureRequest) -> ContrastEnsureResponse:
    start_time = time.time()
    request_id = generate_request_id("con")

    try:
        result = enforce_contrast(request.fg, request.bg, request.target, request.prefer_lighten)
        if result.fallback_used:
            get_metrics_instance().record_contrast_fallback()
        _finish(request_id, "contrast_ensure", start_time)
        return ContrastEnsureResponse(
            hex=result.hex,
            ratio=round(result.ratio, 3),
            target=result.target,
            iterations=result.iterations,
            converged=result.converged,
            fallback_used=result.fallback_used,
            level=wcag_level(result.ratio),
        )

    except HTTPException:
        raise
    except Exception as e:
        raise _to_http_error(request_id, "contrast_ensure", e) from e


@router.post("/contrast/auto-tune",
            response_model=AutoTuneResponse,
            summary="Auto-Tune Contrast Pair",
            description="Push both colors apart in lightness until the target ratio is met")
async def auto_tune_endpoint(request: AutoTuneRequest) -> AutoTuneResponse:
    start_time = time.time()
    request_id = generate_request_id("con")

    try:
        result = auto_tune_pair(request.fg, request.bg, request.target)
        _finish(request_id, "contrast_auto_tune", start_time)
        return AutoTuneResponse(
            fg=result.fg,
            bg=result.bg,
            ratio=round(result.ratio, 3),
            target=result.target,
            iterations=result.iterations,
            converged=result.converged,
            level=wcag_level(result.ratio),
        )

    except HTTPException:
        raise
    except Exception as e:
        raise _to_http_error(request_id, "contrast_auto_tune", e) from e


@router.post("/mood-board",
            response_model=MoodBoardResponse,
            summary="Generate Mood Board",
            description="One seeded cluster per mood type around a base and a required color")
async def create_mood_board(request: MoodBoardRequest) -> MoodBoardResponse:
    start_time = time.time()
    request_id = generate_request_id("mood")

    try:
        policy = request.policy.to_policy() if request.policy else None
        clusters = generate_mood_board(
            request.base_hex,
            request.required_hex,
            seed=request.seed,
            include_cool=request.include_cool,
            policy=policy,
        )
        _count_relaxed(clusters)
        _finish(request_id, "mood_board", start_time)
        return MoodBoardResponse(
            seed=request.seed,
            clusters=[_cluster_response(cluster) for cluster in clusters],
        )

    except HTTPException:
        raise
    except Exception as e:
        raise _to_http_error(request_id, "mood_board", e) from e


@router.post("/mood-clusters",
            response_model=MoodClusterResponse,
            summary="Generate Mood Cluster",
            description="One seeded 10-slot cluster of the requested mood type")
async def create_cluster(request: MoodClusterRequest) -> MoodClusterResponse:
    start_time = time.time()
    request_id = generate_request_id("mood")

    try:
        policy = request.policy.to_policy() if request.policy else None
        cluster = create_mood_cluster(
            request.base_hex, request.required_hex, request.type, seed=request.seed, policy=policy
        )
        _count_relaxed([cluster])
        _finish(request_id, "mood_cluster", start_time)
        return _cluster_response(cluster)

    except HTTPException:
        raise
    except Exception as e:
        raise _to_http_error(request_id, "mood_cluster", e) from e


@router.post("/mood-clusters/regenerate",
            response_model=MoodClusterResponse,
            summary="Regenerate Mood Cluster",
            description="Re-derive unlocked slots of a persisted cluster, applying locks and edits first")
async def regenerate_cluster(request: MoodRegenerateRequest) -> MoodClusterResponse:
    start_time = time.time()
    request_id = generate_request_id("mood")

    try:
        cluster = MoodCluster.from_dict(request.cluster)
        for slot_id in request.locked_slots or []:
            cluster = set_slot_locked(cluster, slot_id, True)
        for slot_id, hex_color in (request.edits or {}).items():
            cluster = edit_slot_color(cluster, slot_id, hex_color)

        policy = request.policy.to_policy() if request.policy else None
        cluster = regenerate_mood_cluster(
            cluster,
            seed=request.seed,
            base_hex=request.base_hex,
            required_hex=request.required_hex,
            slots_to_regenerate=request.slots_to_regenerate,
            force_all=request.force_all,
            policy=policy,
        )
        _count_relaxed([cluster])
        _finish(request_id, "mood_regenerate", start_time)
        return _cluster_response(cluster)

    except HTTPException:
        raise
    except Exception as e:
        raise _to_http_error(request_id, "mood_regenerate", e) from e


@router.post("/projects/merge",
            response_model=ProjectMergeResponse,
            summary="Merge Project Colors",
            description="Deduplicated, neutral-throttled palette across all project sections")
async def merge_project(request: ProjectMergeRequest) -> ProjectMergeResponse:
    start_time = time.time()
    request_id = generate_request_id("merge")

    try:
        merged = merge_project_colors(request.project, request.overrides)
        _finish(request_id, "project_merge", start_time)
        return ProjectMergeResponse(
            project_name=request.project.project_name,
            count=len(merged),
            colors=[entry.model_dump() for entry in merged],
        )

    except HTTPException:
        raise
    except Exception as e:
        raise _to_http_error(request_id, "project_merge", e) from e


@router.post("/projects/soc",
            summary="Export Project Swatches",
            description="Merged project palette as a LibreOffice .soc color table")
async def export_project_soc(request: ProjectSocRequest) -> Response:
    start_time = time.time()
    request_id = generate_request_id("soc")

    try:
        merged = merge_project_colors(request.project, request.overrides)
        document = generate_soc(merged, sanitize_names=request.sanitize_names)
        _finish(request_id, "project_soc", start_time)
        return Response(
            content=document,
            media_type=SOC_MEDIA_TYPE,
            headers={"X-Request-ID": request_id},
        )

    except HTTPException:
        raise
    except Exception as e:
        raise _to_http_error(request_id, "project_soc", e) from e


@router.post("/palettes/soc",
            summary="Export Palette Swatches",
            description="Flat name-to-color mapping cleaned up and exported as a .soc color table")
async def export_palette_soc(request: PaletteSocRequest) -> Response:
    start_time = time.time()
    request_id = generate_request_id("soc")

    try:
        colors = process_colors(
            request.colors,
            delta_e=request.delta_e,
            max_neutrals=request.max_neutrals,
            max_colors=request.max_colors,
        )
        document = generate_soc(colors, sanitize_names=request.sanitize_names)
        _finish(request_id, "palette_soc", start_time)
        return Response(
            content=document,
            media_type=SOC_MEDIA_TYPE,
            headers={"X-Request-ID": request_id},
        )

    except HTTPException:
        raise
    except Exception as e:
        raise _to_http_error(request_id, "palette_soc", e) from e


@router.post("/presets/random",
            summary="Random Preset",
            description="Random generation parameters, optionally cranked to full Apocalypse")
async def random_preset(request: PresetRequest) -> Dict[str, Any]:
    start_time = time.time()
    request_id = generate_request_id("pre")

    try:
        rng = np.random.default_rng(request.seed)
        params = generate_random_palette(rng, request.theme_name)
        if request.crank:
            params = crank_apocalypse(params)
        _finish(request_id, "preset_random", start_time)
        return params.to_dict()

    except HTTPException:
        raise
    except Exception as e:
        raise _to_http_error(request_id, "preset_random", e) from e
