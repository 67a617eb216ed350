"""mac-cleanup data models."""

from mac_cleanup.models.category import Category, Config, Group
from mac_cleanup.models.clean_result import CleanResult, Report
from mac_cleanup.models.progress import CategoryCleaned, CleanCallbacks, CleanProgress, ItemCleaned
from mac_cleanup.models.scan_result import CleanableItem, ScanResult
from mac_cleanup.models.target import BuiltinCleaner, Target

__all__ = [
    "BuiltinCleaner",
    "Category",
    "CategoryCleaned",
    "CleanCallbacks",
    "CleanProgress",
    "CleanResult",
    "CleanableItem",
    "Config",
    "Group",
    "ItemCleaned",
    "Report",
    "ScanResult",
    "Target",
]
