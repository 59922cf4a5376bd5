"""FastAPI application for qriskit."""
from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, Header, HTTPException, Request, status
from fastapi.responses import JSONResponse, Response

from .config import settings
from .errors import ServiceError
from .logging_conf import configure_logging
from .middleware import RequestLoggingMiddleware
from .monitoring import metrics_payload, record_edit, record_service_error
from .schemas import DecodeImageRequest, EditRequest, EditResponse, FieldSchema, ParseRequest, ParseResponse
from .services.editor import FieldView, InspectResult, QRISEditor

app = FastAPI(title="qriskit", version="0.1.0")
app.add_middleware(RequestLoggingMiddleware)

logger = logging.getLogger("qriskit.api")


def _warn_insecure_defaults() -> None:
    if settings.api_key == "dev-secret-key":
        logger.warning(
            "api key uses the default value",
            extra={"config_key": "api_key"},
        )


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging()
    _warn_insecure_defaults()


async def require_api_key(x_api_key: str = Header(...)) -> None:
    if x_api_key != settings.api_key:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")


def get_editor() -> QRISEditor:
    return QRISEditor()


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    route = request.scope.get("route")
    route_path = route.path if route else request.url.path
    logger.warning(
        "service error",
        extra={"code": exc.code, "path": route_path, "method": request.method},
    )
    record_service_error(exc.code, route_path)
    return JSONResponse(status_code=exc.status_code, content={"code": exc.code, "message": exc.message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    route = request.scope.get("route")
    route_path = route.path if route else request.url.path
    logger.exception(
        "unhandled exception",
        extra={"path": route_path, "method": request.method},
    )
    return JSONResponse(status_code=500, content={"code": "ERR_INTERNAL", "message": "Internal server error"})


def _field_schema(view: FieldView) -> FieldSchema:
    return FieldSchema(
        tag=view.tag,
        length=view.length,
        value=view.value,
        description=view.description,
        subfields=[_field_schema(sub) for sub in view.subfields],
    )


def _parse_response(result: InspectResult) -> ParseResponse:
    return ParseResponse(
        data=result.data,
        fields=[_field_schema(view) for view in result.fields],
        is_static=result.is_static,
        is_dynamic=result.is_dynamic,
        crc_valid=result.crc_valid,
    )


@app.get("/health", tags=["system"])
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metrics", tags=["system"])
async def metrics() -> Response:
    payload, content_type = metrics_payload()
    return Response(content=payload, media_type=content_type)


@app.post("/v1/qris/parse", response_model=ParseResponse, tags=["qris"], dependencies=[Depends(require_api_key)])
async def parse_qris(payload: ParseRequest, editor: QRISEditor = Depends(get_editor)) -> ParseResponse:
    return _parse_response(editor.inspect(payload.payload))


@app.post("/v1/qris/decode", response_model=ParseResponse, tags=["qris"], dependencies=[Depends(require_api_key)])
async def decode_qris(payload: DecodeImageRequest, editor: QRISEditor = Depends(get_editor)) -> ParseResponse:
    return _parse_response(editor.inspect_image(payload.image_base64))


@app.post("/v1/qris/edit", response_model=EditResponse, tags=["qris"], dependencies=[Depends(require_api_key)])
async def edit_qris(payload: EditRequest, editor: QRISEditor = Depends(get_editor)) -> EditResponse:
    result = editor.edit(
        payload.payload,
        merchant_name=payload.merchant_name,
        merchant_city=payload.merchant_city,
        postal_code=payload.postal_code,
        amount=payload.amount,
        fee_type=payload.fee_type,
        fee_value=payload.fee_value,
        render=payload.render,
        size=payload.size,
    )
    record_edit(result.is_dynamic)

    return EditResponse(
        payload=result.payload,
        crc=result.crc,
        is_dynamic=result.is_dynamic,
        qr_png_base64=result.qr_png_base64,
    )
