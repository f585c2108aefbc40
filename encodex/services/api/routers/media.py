# encodex/services/api/routers/media.py
from __future__ import annotations
from http import HTTPStatus
from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException

from encodex.common.logging import get_logger
from encodex.common.settings import get_settings
from encodex.domain.dataclasses.reports import CollectingListener
from encodex.domain.enums.capability import CapabilityKind
from encodex.domain.errors import (
    EncoderError,
    EncoderIOError,
    EncoderProtocolError,
    InputFormatError,
    InvalidAttributesError,
)
from encodex.services.api.deps import get_encoder
from encodex.services.encoder.encoder import Encoder
from encodex.services.mappers.encoding import (
    to_domain_attributes,
    to_encode_response,
    to_media_info_read,
)
from encodex.services.schemas import (
    CapabilityListRead,
    EncodeRequest,
    EncodeResponse,
    FrameRequest,
    MediaInfoRead,
    ProbeRequest,
)

logger = get_logger(__name__)
cfg = get_settings()
router = APIRouter(prefix=cfg.api.prefix, tags=["media"])


def _raise_http(e: Exception) -> NoReturn:
    if isinstance(e, FileNotFoundError):
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=f"Source not found: {e}") from e
    if isinstance(e, (InputFormatError, InvalidAttributesError)):
        raise HTTPException(status_code=HTTPStatus.UNPROCESSABLE_ENTITY, detail=str(e)) from e
    if isinstance(e, EncoderProtocolError):
        raise HTTPException(status_code=HTTPStatus.BAD_GATEWAY, detail=str(e)) from e
    if isinstance(e, EncoderIOError):
        raise HTTPException(status_code=HTTPStatus.INTERNAL_SERVER_ERROR, detail=str(e)) from e
    raise e


@router.get("/capabilities/{kind}", response_model=CapabilityListRead)
def list_capabilities(kind: CapabilityKind, encoder: Encoder = Depends(get_encoder)) -> CapabilityListRead:
    try:
        names = encoder.list_capabilities(kind)
    except EncoderError as e:
        _raise_http(e)
    return CapabilityListRead(kind=kind, names=names)


@router.post("/probe", response_model=MediaInfoRead)
def probe(req: ProbeRequest, encoder: Encoder = Depends(get_encoder)) -> MediaInfoRead:
    try:
        info = encoder.probe(req.path)
    except EncoderError as e:
        _raise_http(e)
    return to_media_info_read(info)


@router.post("/encode", response_model=EncodeResponse)
def encode(req: EncodeRequest, encoder: Encoder = Depends(get_encoder)) -> EncodeResponse:
    listener = CollectingListener()
    listener.report.start()
    try:
        encoder.encode(req.source, req.target, to_domain_attributes(req), listener)
    except (EncoderError, InvalidAttributesError) as e:
        logger.warning("Encode %s -> %s failed: %s", req.source, req.target, e)
        _raise_http(e)
    listener.report.stop()
    return to_encode_response(listener.report)


@router.post("/frame", status_code=HTTPStatus.NO_CONTENT)
def extract_frame(req: FrameRequest, encoder: Encoder = Depends(get_encoder)) -> None:
    try:
        encoder.extract_frame(req.source, req.target, req.offset)
    except (EncoderError, FileNotFoundError) as e:
        _raise_http(e)
