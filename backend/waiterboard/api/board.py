from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from waiterboard.db.database import get_db_session
from waiterboard.models.waiter_record import OrderType
from waiterboard.schemas.board import PatientBoardResponse, ProductionBoardEntry
from waiterboard.services.board_service import BoardService

router = APIRouter()


@router.get("/production", response_model=List[ProductionBoardEntry])
async def get_production_board(
    order_type: Optional[OrderType] = None,
    search: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db_session),
):
    """
    Orders in production, soonest due first, with countdown state.
    """
    board_service = BoardService(db)
    return await board_service.production_board(order_type=order_type, search=search)


@router.get("/patient", response_model=PatientBoardResponse)
async def get_patient_board(db: AsyncSession = Depends(get_db_session)):
    """
    Public board of ready waiter orders with masked names.
    """
    board_service = BoardService(db)
    board = await board_service.patient_board()
    await db.commit()
    return board
