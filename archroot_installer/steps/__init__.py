from .step_00_preflight import PreflightStep
from .step_10_prepare_staging import PrepareStagingStep
from .step_20_fetch_index import FetchIndexStep
from .step_30_resolve import ResolveDependenciesStep
from .step_40_download import DownloadPackagesStep
from .step_50_extract import ExtractPackagesStep
from .step_60_install_base import InstallBaseSystemStep
from .step_70_install_init import InstallSelfAsInitStep

__all__ = [
    "PreflightStep",
    "PrepareStagingStep",
    "FetchIndexStep",
    "ResolveDependenciesStep",
    "DownloadPackagesStep",
    "ExtractPackagesStep",
    "InstallBaseSystemStep",
    "InstallSelfAsInitStep",
]
