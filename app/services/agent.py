"""Movie finder agent which orchestrates prompt building, the model call, and normalization."""

import logging
import uuid

from app.models import MovieRequest, MovieResponse
from app.services.conversation import build_messages, resolve_instructions
from app.services.llm import OllamaService
from app.services.normalizer import normalize_answer

logger = logging.getLogger(__name__)


class MovieFinderAgent:
    def __init__(
        self,
        llm: OllamaService,
        name: str = "MovieFinder",
        instructions: str | None = None,
    ):
        self._llm = llm
        self.name = name
        self.instructions = resolve_instructions(instructions)

    async def find_movie(self, request: MovieRequest) -> MovieResponse:
        """
        Identify the movie described in the request.

        Model failures are logged and re-raised; an unreadable reply is not an
        error and comes back as a low-confidence fallback result.
        """
        logger.info(
            "%s processing movie search: history=%d description=%r",
            self.name, len(request.history), request.description,
        )
        messages = build_messages(request, self.instructions)

        try:
            raw_answer = await self._llm.chat(messages)
        except Exception:
            logger.exception(
                "Error processing movie search request (conversation=%s)",
                request.conversation_id,
            )
            raise

        logger.info("Received response from AI model (%d chars)", len(raw_answer))
        result = normalize_answer(raw_answer)

        return MovieResponse(
            conversation_id=(
                request.conversation_id
                if request.conversation_id is not None
                else str(uuid.uuid4())
            ),
            result=result,
            raw_answer=raw_answer,
        )
