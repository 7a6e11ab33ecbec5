"""
Directory component - browse approved advisors and laboratories.
"""

from .component import filter_profiles, run, run_browse, unique_locations
from .models import BrowseInput, DirectoryOutput
from .ports import ProfileRepoPort

__all__ = [
    "run",
    "run_browse",
    "filter_profiles",
    "unique_locations",
    "BrowseInput",
    "DirectoryOutput",
    "ProfileRepoPort",
]
