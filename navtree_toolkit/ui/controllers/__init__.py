from .navigation_controller import NavigationController, OperationResult

__all__ = ["NavigationController", "OperationResult"]
