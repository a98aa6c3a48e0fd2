import os
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, Request, Response, status
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from arcade.api.dependencies import get_history_service, get_tournament_service
from arcade.core.exceptions import (
    AlreadyStarted,
    MatchNotFound,
    PersistenceFailure,
    PlayerNotFound,
    TournamentAlreadyStarted,
    TournamentError,
)
from arcade.models.history_model import HistoryRecord
from arcade.models.tournament_model import Match, Player, Tournament
from arcade.schemas.bracket_schemas import BracketData
from arcade.schemas.tournament_schemas import AddPlayerRequest, MatchResultRequest, MatchResultResponse
from arcade.services.history_service import HistoryService
from arcade.services.tournament_service import TournamentService

router = APIRouter()
templates = Jinja2Templates(directory=os.path.join(os.path.dirname(__file__), "..", "..", "templates"))

# Handlers that mutate the tournament are plain ``async def`` with no await
# inside, so they run one at a time on the event loop.


def to_http_exception(error: TournamentError) -> HTTPException:
    if isinstance(error, (PlayerNotFound, MatchNotFound)):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, (AlreadyStarted, TournamentAlreadyStarted)):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))


@router.get("", response_model=Tournament, summary="Current tournament")
async def get_tournament(service: TournamentService = Depends(get_tournament_service)):
    return service.tournament


@router.post("/players", response_model=Player, status_code=201, summary="Register a player")
async def add_player(payload: AddPlayerRequest, service: TournamentService = Depends(get_tournament_service)):
    """
    Adds a player to the roster. Only allowed before the tournament starts.

    - **name**: display name, unique within the tournament ignoring case.
    - **userId** (optional): the registered account this player belongs to.
    """
    try:
        return service.add_player(payload.name, payload.user_id)
    except TournamentError as e:
        raise to_http_exception(e)


@router.delete("/players/{player_id}", status_code=204, summary="Remove a player")
async def remove_player(
    player_id: str = Path(..., description="The ID of the player"),
    service: TournamentService = Depends(get_tournament_service),
):
    try:
        service.remove_player(player_id)
    except TournamentError as e:
        raise to_http_exception(e)
    return Response(status_code=204)


@router.post("/start", response_model=Match, summary="Seed the bracket and start the tournament")
async def start_tournament(service: TournamentService = Depends(get_tournament_service)):
    try:
        return service.start()
    except TournamentError as e:
        raise to_http_exception(e)


@router.get("/current-match", response_model=Match, summary="Match waiting to be played")
async def get_current_match(service: TournamentService = Depends(get_tournament_service)):
    match = service.current_match
    if match is None:
        raise HTTPException(status_code=404, detail="No match is being played")
    return match


@router.post("/result", response_model=MatchResultResponse, summary="Record the result of the current match")
async def record_match_result(payload: MatchResultRequest, service: TournamentService = Depends(get_tournament_service)):
    """
    Records the score of the current match, advances the winner and returns
    the next match to play. Scores must differ.
    """
    try:
        next_match = service.record_match_result(payload.player1_score, payload.player2_score)
    except TournamentError as e:
        raise to_http_exception(e)
    return MatchResultResponse(
        completed=service.tournament.completed,
        next_match=next_match,
        champion=service.get_champion(),
    )


@router.get("/bracket", response_model=BracketData, summary="Bracket grouped by round")
async def get_bracket(service: TournamentService = Depends(get_tournament_service)):
    return service.get_bracket_data()


@router.get("/bracket/view", response_class=HTMLResponse, summary="Bracket page")
async def view_bracket(request: Request, service: TournamentService = Depends(get_tournament_service)):
    return templates.TemplateResponse(
        request,
        "bracket.html",
        {
            "tournament": service.tournament,
            "bracket": service.get_bracket_data(),
            "current_match": service.current_match,
        },
    )


@router.post("/reset", response_model=Tournament, summary="Start over with an empty tournament")
async def reset_tournament(service: TournamentService = Depends(get_tournament_service)):
    return service.reset()


# --- History ---

@router.post("/save", response_model=HistoryRecord, status_code=201, summary="Save the tournament to history")
async def save_tournament(
    service: TournamentService = Depends(get_tournament_service),
    history: HistoryService = Depends(get_history_service),
):
    try:
        return await history.save(service.tournament)
    except PersistenceFailure as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/history", response_model=List[HistoryRecord], summary="Saved tournaments, newest first")
async def list_history(history: HistoryService = Depends(get_history_service)):
    try:
        records = await history.load_history()
    except PersistenceFailure as e:
        raise HTTPException(status_code=503, detail=str(e))
    return sorted(records, key=lambda r: r.timestamp, reverse=True)
