"""modebridge - per-mode runtime bridge for RoboPaint-style drawing modes."""

__version__ = "0.1.0"
__logo__ = "🖌"
