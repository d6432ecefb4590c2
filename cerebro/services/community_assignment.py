"""Service: run a pluggable community computer."""

from __future__ import annotations

import logging

from cerebro.ports.community import CommunityComputer

log = logging.getLogger(__name__)


class CommunityAssigner:
    def assign_communities(self, computer: CommunityComputer | None) -> None:
        if computer is None:
            raise RuntimeError("No community computer configured")
        log.info("Detecting communities with %s", type(computer).__name__)
        computer.compute()
        computer.assign_community()
