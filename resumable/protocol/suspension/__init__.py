from .suspension_controller import SuspensionController

__all__ = [
    "SuspensionController",
]
