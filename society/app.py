from sqlalchemy.ext.asyncio import async_sessionmaker

from society.handlers import admin, resident, security, common
from society.handlers.base import Dispatcher
from society.services.activity_service import ActivityService
from society.services.billing_service import BillingService
from society.services.booking_service import BookingService
from society.services.complaint_service import ComplaintService
from society.services.dashboard_service import DashboardService
from society.services.expense_service import ExpenseService
from society.services.flat_service import FlatService
from society.services.notice_service import NoticeService
from society.services.stats_service import StatsReporter
from society.services.user_service import UserService
from society.services.visitor_service import VisitorLedger


class Services:
    """Every service bound to the same session factory."""

    def __init__(self, session_factory: async_sessionmaker):
        self.activity = ActivityService(session_factory)
        self.billing = BillingService(session_factory)
        self.bookings = BookingService(session_factory)
        self.complaints = ComplaintService(session_factory)
        self.dashboard = DashboardService(session_factory)
        self.expenses = ExpenseService(session_factory)
        self.flats = FlatService(session_factory)
        self.notices = NoticeService(session_factory)
        self.stats = StatsReporter(session_factory)
        self.users = UserService(session_factory)
        self.visitors = VisitorLedger(session_factory)


def create_dispatcher(session_factory: async_sessionmaker) -> Dispatcher:
    dp = Dispatcher(Services(session_factory))
    dp.include_router(admin.router)
    dp.include_router(resident.router)
    dp.include_router(security.router)
    dp.include_router(common.router)
    return dp
