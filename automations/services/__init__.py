"""
Automation services.

- executors: one executor per action type
- runner: step-by-step run execution
- dispatcher: event trigger matching and run creation
"""

from .dispatcher import create_run, dispatch_trigger, filters_match, start_run
from .runner import AutomationRunner

__all__ = [
    'AutomationRunner',
    'create_run',
    'dispatch_trigger',
    'filters_match',
    'start_run',
]
