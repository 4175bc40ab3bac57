"""ORM models."""

from lottery_admin.models.diary import Diary
from lottery_admin.models.diary_allotment import AllotmentStatus, DiaryAllotment
from lottery_admin.models.issuer import Issuer
from lottery_admin.models.lottery_winner import LotteryWinner
from lottery_admin.models.prize_category import PrizeCategory
from lottery_admin.models.ticket_sale import TicketSale
from lottery_admin.winner_guard import install_winner_guard

install_winner_guard(LotteryWinner)

__all__ = [
    "AllotmentStatus",
    "Diary",
    "DiaryAllotment",
    "Issuer",
    "LotteryWinner",
    "PrizeCategory",
    "TicketSale",
]
