"""In-memory targets for tests that must not touch the filesystem."""

from __future__ import annotations

from mac_cleanup.models.category import Category
from mac_cleanup.models.clean_result import CleanResult
from mac_cleanup.models.scan_result import CleanableItem, ScanResult
from mac_cleanup.models.target import BuiltinCleaner, Target


class FakeTarget(Target):
    """Target returning canned items."""

    def __init__(
        self,
        category: Category,
        items: list[CleanableItem] | None = None,
        available: bool = True,
        fail: bool = False,
        error: str = "",
    ) -> None:
        super().__init__(category)
        self._items = items or []
        self._available = available
        self._fail = fail
        self._error = error
        self.scan_count = 0

    def is_available(self) -> bool:
        return self._available

    def scan(self) -> ScanResult:
        self.scan_count += 1
        if self._fail:
            raise RuntimeError("scan failed")
        result = ScanResult.from_items(self.category, list(self._items))
        result.error = self._error
        return result


class FakeBuiltinTarget(FakeTarget, BuiltinCleaner):
    """Builtin target whose clean returns a canned result."""

    def __init__(self, category: Category, result: CleanResult | None = None, **kwargs) -> None:
        super().__init__(category, **kwargs)
        self._result = result
        self.cleaned: list[list[CleanableItem]] = []

    def clean(self, items: list[CleanableItem]) -> CleanResult:
        self.cleaned.append(list(items))
        if self._fail:
            raise RuntimeError("clean failed")
        if self._result is not None:
            return self._result
        return CleanResult(
            category=self.category,
            cleaned_items=len(items),
            freed_space=sum(i.size for i in items),
        )


def items(*specs: tuple[str, int]) -> list[CleanableItem]:
    """Build items from ``(path, size)`` pairs."""
    return [CleanableItem(path=path, size=size) for path, size in specs]
