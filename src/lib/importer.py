"""
Import hook applying the source filter to selected modules

    finder = install("myapp", "tests.*")
    import myapp.worker        # directive comments are live
    uninstall(finder)

Module names match a pattern when fnmatch accepts them, or when they equal
the pattern or are a submodule of it. Matching modules are compiled from
filtered source and never from cached bytecode, so a .pyc written without
the filter is not picked up and none is written with it.
"""

import fnmatch
import sys
from importlib.abc import MetaPathFinder
from importlib.machinery import ModuleSpec, PathFinder, SourceFileLoader
from importlib.util import decode_source
from types import CodeType
from typing import Iterable, List, Optional, Sequence

from .filter import SourceFilter
from .log import LOG


class DirectiveLoader(SourceFileLoader):
    """Source loader that rewrites directive comments before compiling"""

    def __init__(self, fullname: str, path: str, source_filter: SourceFilter) -> None:
        super().__init__(fullname, path)
        self.source_filter = source_filter

    def source_to_code(self, data, path, *, _optimize=-1) -> CodeType:
        source = decode_source(data) if isinstance(data, (bytes, bytearray)) else data
        filtered = self.source_filter.source_transform(source, path)
        return compile(filtered, path, "exec", dont_inherit=True, optimize=_optimize)

    def get_code(self, fullname: str) -> CodeType:
        path = self.get_filename(fullname)
        return self.source_to_code(self.get_data(path), path)


class DirectiveFinder(MetaPathFinder):
    """
    Meta path finder routing matching modules through DirectiveLoader

    Attributes:
        patterns: Module name patterns
        source_filter: Filter shared by all loaders of this finder
    """

    def __init__(self, patterns: Iterable[str], source_filter: Optional[SourceFilter] = None) -> None:
        self.patterns: List[str] = list(patterns)
        self.source_filter = source_filter if source_filter is not None else SourceFilter()

    def module_matches(self, fullname: str) -> bool:
        for pattern in self.patterns:
            if fullname == pattern or fullname.startswith(pattern + "."):
                return True
            if fnmatch.fnmatchcase(fullname, pattern):
                return True
        return False

    def find_spec(
        self, fullname: str, path: Optional[Sequence[str]], target=None
    ) -> Optional[ModuleSpec]:
        if not self.module_matches(fullname):
            return None
        spec = PathFinder.find_spec(fullname, path)
        if spec is None or not isinstance(spec.loader, SourceFileLoader):
            return None
        LOG(f"Module {fullname} routed through filter ({spec.origin})", level=2)
        spec.loader = DirectiveLoader(fullname, spec.origin, self.source_filter)
        return spec


def install(*patterns: str, source_filter: Optional[SourceFilter] = None) -> Optional[DirectiveFinder]:
    """
    Put a DirectiveFinder first on sys.meta_path

    Args:
        *patterns: Module name patterns to filter
        source_filter: Filter to use (a default SourceFilter otherwise)

    Returns:
        The installed finder, or None when the filter is disabled, in which
        case directive comments in those modules stay plain comments
    """
    source_filter = source_filter if source_filter is not None else SourceFilter()
    if not source_filter.enabled:
        LOG("Filter disabled, import hook not installed", level=2)
        return None
    finder = DirectiveFinder(patterns, source_filter)
    sys.meta_path.insert(0, finder)
    LOG(f"Import hook installed for {', '.join(patterns)}", level=2)
    return finder


def uninstall(finder: Optional[DirectiveFinder]) -> None:
    """Remove a finder returned by install(); None and unknown finders are ignored"""
    if finder in sys.meta_path:
        sys.meta_path.remove(finder)
