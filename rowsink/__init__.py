from .config import DestinationConfig
from .destination.writer import Destination
from .models import Action, ChangeRecord
from .sql.placeholders import PlaceholderFormat

__all__ = ["Destination", "DestinationConfig", "ChangeRecord", "Action", "PlaceholderFormat"]
