from __future__ import annotations
import logging

log = logging.getLogger("shiftmarket.revalidation")

# Views that show application state, refreshed after every status change
APPLICATION_VIEWS = ("/dashboard", "/shifts", "/candidates", "/", "/schedule", "/jobs")


class PathInvalidator:
    """Collects the view paths the presentation layer has to refresh."""

    def __init__(self) -> None:
        self.paths: list[str] = []

    def invalidate(self, path: str) -> None:
        if path in self.paths:
            return
        log.debug("invalidate %s", path)
        self.paths.append(path)

    def invalidate_many(self, paths) -> list[str]:
        for p in paths:
            self.invalidate(p)
        return list(self.paths)


def get_invalidator() -> PathInvalidator:
    return PathInvalidator()


def application_paths(shift_id: int) -> list[str]:
    return [*APPLICATION_VIEWS, f"/shifts/{shift_id}"]
