from .monitor import ContainerMonitor, format_inspect_json
from .service import SweepService

__all__ = ["ContainerMonitor", "SweepService", "format_inspect_json"]
