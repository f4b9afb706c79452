"""
Workforce Docs: timesheets, vehicle inspections, RAMS sign-off and messaging.
"""
__version__ = "1.0.0"
