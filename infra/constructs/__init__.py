from .api import Api as Api
from .database import Database as Database
from .events import EventBus as EventBus
from .events import Schedule as Schedule
from .functions import Functions as Functions
from .layers import Layers as Layers
