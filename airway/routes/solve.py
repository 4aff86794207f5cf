"""POST /api/solve and /api/render — one-shot geometry over REST.

Used when the WebSocket is unavailable and for exports.  ``/api/solve`` takes
slider values (degrees), ``/api/solve/parameters`` takes raw solver
parameters (radians).  Both return a tagged ``SolveResult`` so an
out-of-domain parameter set never puts NaN into the JSON.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Response

from airway.geometry import solve_checked
from airway.models import AirwayParameters, RenderRequest, SliderConfig, SolveResult
from airway.render import render_svg

logger = logging.getLogger("airway.solve")

router = APIRouter(prefix="/api", tags=["solve"])


def _solve(params: AirwayParameters) -> SolveResult:
    try:
        result = solve_checked(params)
    except Exception as exc:
        logger.exception("Solve failed")
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    if result.status != "ok":
        logger.info("Out-of-domain parameters: %s", result.reason)
    return result


@router.post("/solve", response_model=SolveResult)
async def solve_sliders(sliders: SliderConfig) -> SolveResult:
    """Solve the airway for the current slider values."""
    return _solve(sliders.to_parameters())


@router.post("/solve/parameters", response_model=SolveResult)
async def solve_parameters(params: AirwayParameters) -> SolveResult:
    """Solve the airway for raw solver parameters (angles in radians)."""
    return _solve(params)


@router.post("/render")
async def render(request: RenderRequest) -> Response:
    """Render the solved airway as SVG.

    Returns 422 with the reason when the parameters are out of domain.
    """
    result = _solve(request.sliders.to_parameters())
    if result.geometry is None:
        raise HTTPException(status_code=422, detail=result.reason)
    return Response(
        content=render_svg(result.geometry, request.display),
        media_type="image/svg+xml",
    )
