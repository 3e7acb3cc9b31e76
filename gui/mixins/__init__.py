from gui.mixins.report_mixin import ReportMixin
from gui.mixins.throbber_mixin import ThrobberMixin

__all__ = ["ReportMixin", "ThrobberMixin"]
