"""Mock agent inventory for testing."""

from __future__ import annotations


class MockAgentInventory:
    """Returns a scripted sequence of registered-id sets, one per poll.

    After the script runs out, the last set is repeated.
    """

    def __init__(self, polls: list[set[str]] | None = None):
        self._polls = list(polls or [set()])
        self.poll_count = 0

    def registered_instance_ids(self) -> set[str]:
        index = min(self.poll_count, len(self._polls) - 1)
        self.poll_count += 1
        return set(self._polls[index])
