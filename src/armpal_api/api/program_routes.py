"""Program authoring endpoints: parse, enrich and modify marketplace programs."""
from typing import Optional

from fastapi import APIRouter

from armpal_api.errors import failure_label
from armpal_api.models import EnrichProgramRequest, ModifyProgramRequest, ParseProgramRequest
from armpal_api.services.program_tools import ProgramToolsService

router = APIRouter(prefix="/api")

PARSE_FAILED = "Failed to parse program"
ENRICH_FAILED = "Failed to enrich program"
MODIFY_FAILED = "Failed to modify program"


@router.post("/parseProgram")
def parse_program(payload: Optional[ParseProgramRequest] = None):
    payload = payload or ParseProgramRequest()
    with failure_label(PARSE_FAILED):
        return ProgramToolsService.parse_program(payload.rawContent)


@router.post("/enrichProgram")
def enrich_program(payload: Optional[EnrichProgramRequest] = None):
    payload = payload or EnrichProgramRequest()
    with failure_label(ENRICH_FAILED):
        return ProgramToolsService.enrich_program(payload.rawContent, payload.parsedProgram)


@router.post("/modifyProgram")
def modify_program(payload: Optional[ModifyProgramRequest] = None):
    payload = payload or ModifyProgramRequest()
    with failure_label(MODIFY_FAILED):
        return ProgramToolsService.modify_program(payload.baseProgram, payload.modification)
