import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response
from pydantic import ValidationError

from ducktype.schemas.gemini import PromptsOut, QuestionsOut, SocraticRequest, StarterPromptsRequest
from ducktype.services.duck_service import DuckService
from ducktype.services.generation_client import GenerationClient, get_generation_client


router = APIRouter(tags=["gemini"])
logger = logging.getLogger(__name__)

_NO_STORE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate, max-age=0",
    "Pragma": "no-cache",
    "Expires": "0",
}


# The body is optional context; anything that isn't a valid payload counts as "no summaries"
async def _optional_prompts_payload(request: Request) -> Optional[StarterPromptsRequest]:
    raw = await request.body()
    if not raw.strip():
        return None
    try:
        return StarterPromptsRequest.model_validate_json(raw)
    except ValidationError:
        logger.info("prompts.body.ignored: bytes=%d", len(raw))
        return None


# Returns 1-2 clarifying questions for the conversation so far (never answers)
@router.post("/gemini", response_model=QuestionsOut)
async def ask_questions(
    payload: SocraticRequest,
    generator: GenerationClient = Depends(get_generation_client),
):
    questions = await DuckService(generator).ask_questions(payload.conversation)
    return QuestionsOut(questions=questions)


# Returns 3-6 starter prompts; summaries are only used for the single retry
@router.post("/gemini/prompts", response_model=PromptsOut)
async def starter_prompts(
    response: Response,
    payload: Optional[StarterPromptsRequest] = Depends(_optional_prompts_payload),
    generator: GenerationClient = Depends(get_generation_client),
):
    response.headers.update(_NO_STORE_HEADERS)
    prompts = await DuckService(generator).starter_prompts(payload.summaries if payload else None)
    return PromptsOut(prompts=prompts)
