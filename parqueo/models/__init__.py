# Parqueo: database models
# Import all models here for SQLAlchemy discovery

from parqueo.models.user import User                       # noqa
from parqueo.models.parking_lot import ParkingLot          # noqa
from parqueo.models.parking_space import ParkingSpace      # noqa
from parqueo.models.vehicle import Vehicle                 # noqa
from parqueo.models.parking_record import ParkingRecord    # noqa
from parqueo.models.access_attempt import AccessAttempt    # noqa
