from app.blueprints.api.pump import pump_api
from app.blueprints.api.schedule import schedule_api

__all__ = ["pump_api", "schedule_api"]
