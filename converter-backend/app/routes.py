from fastapi import APIRouter, UploadFile, File, Form, Query, Request, Body
from fastapi import HTTPException
from fastapi.responses import Response
import logging
import os
from typing import Callable, Optional, Tuple

from app.cache import content_key
from app.config import Settings, load_settings
from app.conversions import (
    ConversionResult,
    GEOJSON_MIME,
    SP1_EXTENSIONS,
    check_extension,
    csv_to_sp1,
    default_csv_header,
    log_conversion,
    sp1_to_csv,
    sp1_to_geojson,
)
from app.schemas import SP1DataModel
from sp1.errors import ConversionError, UnsupportedFormatError
from sp1.reader import parse_sp1
from sp1.writer import generate_sp1

logger = logging.getLogger(__name__)

router = APIRouter()


def _settings(request: Request) -> Settings:
    s = getattr(request.app.state, "settings", None)
    return s if s is not None else load_settings()


def _strict(request: Request, strict: Optional[bool]) -> bool:
    return _settings(request).strict_coordinates if strict is None else bool(strict)


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8-sig", errors="replace")


def _resolve_under_root(path: str, root: Optional[str]) -> str:
    """Resolve ``path`` (absolute or relative to ``root``) and refuse anything outside ``root``."""
    if not root:
        raise HTTPException(status_code=403, detail="Path input is disabled (SP1_DATA_ROOT not set)")
    root_real = os.path.realpath(root)
    candidate = os.path.realpath(os.path.join(root_real, path))
    if os.path.commonpath([root_real, candidate]) != root_real:
        raise HTTPException(status_code=403, detail=f"Path outside data root: {path}")
    return candidate


async def _load_source(request: Request, file: Optional[UploadFile], path: Optional[str]) -> Tuple[str, Optional[str]]:
    """Return (text, source filename) from an upload or a filesystem path.

    Raises explicit HTTP errors for bad input combinations, empty or oversized
    uploads and unreadable paths.
    """
    if file and path:
        raise HTTPException(status_code=400, detail="Provide either 'file' or 'path', not both")
    if not file and not path:
        raise HTTPException(status_code=400, detail="No file or path provided")
    settings = _settings(request)
    limit = settings.max_upload_bytes

    if file:
        raw = await file.read()
        if not raw:
            raise HTTPException(status_code=400, detail="Uploaded file is empty")
        if len(raw) > limit:
            raise HTTPException(status_code=413, detail=f"Upload exceeds {limit} bytes")
        return _decode(raw), file.filename

    path = _resolve_under_root(path, settings.data_root)
    if not os.path.exists(path):
        raise HTTPException(status_code=404, detail=f"Path not found: {path}")
    if not os.path.isfile(path):
        raise HTTPException(status_code=400, detail=f"Not a regular file: {path}")
    if os.path.getsize(path) > limit:
        raise HTTPException(status_code=413, detail=f"File exceeds {limit} bytes")
    try:
        with open(path, "rb") as f:
            raw = f.read()
    except PermissionError:
        raise HTTPException(status_code=403, detail=f"Permission denied: {path}")
    return _decode(raw), os.path.basename(path)


def _run(kind: str, fn: Callable, *args, **kwargs):
    """Call a conversion, mapping ConversionError to 415/422 and anything else to 500."""
    try:
        return fn(*args, **kwargs)
    except UnsupportedFormatError as e:
        raise HTTPException(status_code=415, detail=str(e))
    except ConversionError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logging.exception("%s crashed", kind)
        raise HTTPException(status_code=500, detail=f"Converter failure: {type(e).__name__}: {e}")


def _download(res: ConversionResult) -> Response:
    return Response(
        content=res.as_text(),
        media_type=res.mime_type,
        headers={
            "Content-Disposition": f'attachment; filename="{res.filename}"',
            "X-Point-Count": str(res.point_count),
        },
    )


@router.post("/sp1/parse", response_model=SP1DataModel)
async def sp1_parse(
    request: Request,
    file: UploadFile = File(None),
    path: str = Form(None),
    strict: Optional[bool] = Query(None),
) -> SP1DataModel:
    """Parse an SP1 file into its header and ordered points.

    Accepts either an uploaded file (multipart) or a filesystem path provided as form field 'path'.
    Coordinates that could not be parsed come back as null.
    """
    text, name = await _load_source(request, file, path)
    strict_mode = _strict(request, strict)
    _run("sp1_parse", check_extension, name, SP1_EXTENSIONS)

    cache = getattr(request.app.state, "cache", None)
    cache_key = content_key("parse", text, strict_mode) if cache else None
    if cache and cache_key:
        cached = await cache.get_json(cache_key)
        if cached:
            try:
                hit = SP1DataModel(**cached)
            except Exception:
                logger.debug("Ignoring corrupt cache entry %s", cache_key)
            else:
                log_conversion("sp1_parse", "json", len(hit.points), cached=True)
                return hit

    data = _run("sp1_parse", parse_sp1, text, strict=strict_mode)
    resp = SP1DataModel.from_data(data)
    if cache and cache_key:
        await cache.set_json(cache_key, resp.model_dump())
    log_conversion("sp1_parse", "json", len(data.points))
    return resp


@router.post("/sp1/geojson")
async def sp1_geojson(
    request: Request,
    file: UploadFile = File(None),
    path: str = Form(None),
    strict: Optional[bool] = Query(None),
):
    """Convert an SP1 file to a GeoJSON FeatureCollection download (converted.geojson)."""
    text, name = await _load_source(request, file, path)
    strict_mode = _strict(request, strict)

    _run("sp1_geojson", check_extension, name, SP1_EXTENSIONS)

    cache = getattr(request.app.state, "cache", None)
    cache_key = content_key("geojson", text, strict_mode) if cache else None
    if cache and cache_key:
        cached = await cache.get_json(cache_key)
        if isinstance(cached, dict) and cached.get("type") == "FeatureCollection":
            count = len(cached.get("features") or [])
            log_conversion("sp1_to_geojson", "converted.geojson", count, cached=True)
            return _download(ConversionResult(cached, "converted.geojson", GEOJSON_MIME, count))

    res = _run("sp1_geojson", sp1_to_geojson, text, strict=strict_mode, source_name=name)
    if cache and cache_key:
        await cache.set_json(cache_key, res.data)
    return _download(res)


@router.post("/sp1/csv")
async def sp1_csv(
    request: Request,
    file: UploadFile = File(None),
    path: str = Form(None),
    strict: Optional[bool] = Query(None),
):
    """Convert an SP1 file to a CSV point table download (converted.csv)."""
    text, name = await _load_source(request, file, path)
    res = _run("sp1_csv", sp1_to_csv, text, strict=_strict(request, strict), source_name=name)
    return _download(res)


@router.post("/csv/sp1")
async def csv_sp1(
    request: Request,
    file: UploadFile = File(None),
    path: str = Form(None),
    version: Optional[str] = Form(None),
    survey: Optional[str] = Form(None),
    datum: Optional[str] = Form(None),
    projection: Optional[str] = Form(None),
    strict: Optional[bool] = Query(None),
):
    """Convert a CSV point table (ID, X, Y[, Elevation|Z], ...) to an SP1 download.

    The CSV carries no survey metadata, so the SP1 header comes from the form
    fields, falling back to the configured defaults.
    """
    text, name = await _load_source(request, file, path)
    s = _settings(request)
    header = default_csv_header(
        version=version or s.csv_version,
        survey=survey or s.csv_survey,
        datum=datum or s.csv_datum,
        projection=projection or None,
    )
    res = _run("csv_sp1", csv_to_sp1, text, source_name=name, header=header, strict=_strict(request, strict))
    return _download(res)


@router.post("/sp1/render")
async def sp1_render(payload: SP1DataModel = Body(...)):
    """Serialize a structured SP1 document (as returned by /sp1/parse) back to SP1 text."""
    data = payload.to_data()
    text = _run("sp1_render", generate_sp1, data)
    return Response(content=text, media_type="text/plain", headers={"X-Point-Count": str(len(data.points))})

