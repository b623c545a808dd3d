# Schemas package (re-export feature modules for stable imports)
from .appointments.appointment import *
from .diagnosis.diagnosis import *
from .technicians.technician import *
from .locations.location import *
from .notifications.notification import *
from .common.common import *
