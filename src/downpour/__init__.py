__all__ = ["LoadTester", "Outcome", "Report", "ReportBuilder", "fetch_once", "render_report"]


from .core import LoadTester
from .models import Outcome, Report
from .metrics import ReportBuilder
from .worker import fetch_once
from .rendering import render_report
