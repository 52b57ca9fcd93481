from app.core.schemas import GeocodeRequest, GeocodeResult
from fastapi import APIRouter, HTTPException, Query, Request

router = APIRouter(prefix="/places", tags=["places"])


@router.post("/geocode", response_model=GeocodeResult)
async def geocode(req: GeocodeRequest, request: Request) -> GeocodeResult:
    """Resolve an address to coordinates (cached, rate limited)."""
    result = await request.app.state.geocoder.geocode(req.address)
    if not result:
        raise HTTPException(status_code=404, detail="Location not found")
    return result


@router.get("/reverse")
async def reverse_geocode(
    request: Request,
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
) -> dict[str, str]:
    display_name = await request.app.state.geocoder.reverse_geocode(lat, lon)
    if not display_name:
        raise HTTPException(status_code=404, detail="Location not found")
    return {"display_name": display_name}


@router.get("/static-map")
def static_map(
    request: Request,
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    zoom: int = Query(14, ge=1, le=18),
) -> dict[str, str]:
    return {"url": request.app.state.geocoder.get_static_map_url(lat, lon, zoom)}
