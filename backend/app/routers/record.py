from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..deps import get_recorder, require_access_key
from ..services.recorder import Recorder
from ..services.record_links import extract_youtube_link
from ..settings import SETTINGS

logger = logging.getLogger(__name__)

router = APIRouter(tags=["record"])


class RecordRequest(BaseModel):
    # Sent by a mail hook, which uses camelCase keys.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    access_key: str
    email_subject: str = ""
    email_body: str = ""


@router.post("/record")
def post_record(payload: RecordRequest, recorder: Recorder = Depends(get_recorder)):
    require_access_key(payload.access_key)
    logger.info("record request subject=%r", payload.email_subject)

    link = extract_youtube_link(payload.email_body)
    if link is None:
        logger.info("record link not found")
        return Response(status_code=200)

    logger.info("record link=%s", link)
    try:
        recorder.spawn_job(SETTINGS.download_command, [*SETTINGS.record_extra_args, link])
    except OSError as e:
        # The mail hook only cares whether a job was created.
        logger.error("record spawn failed: %s", e)
        return Response(status_code=200)
    return Response(status_code=201)
