from __future__ import annotations

import json
import logging
import sys
from typing import Dict, List

from .config import Settings, build_settings, parse_args
from .engine.session import DungeonSession
from .logging_config import configure_logging

logger = logging.getLogger(__name__)


def render_ascii(session: DungeonSession, lit: bool) -> List[str]:
    """Rows of the map; with ``lit`` only explored tiles are drawn, as a renderer would."""
    grid = session.grid
    rows: List[str] = []
    for y in range(grid.height):
        chars = []
        for x in range(grid.width):
            tile = grid.get(x, y)
            if (x, y) == session.observer_pos:
                chars.append("@")
            elif lit and not tile.explored:
                chars.append(" ")
            else:
                chars.append("#" if tile.blocked else ".")
        rows.append("".join(chars))
    return rows


def summarize(session: DungeonSession, settings: Settings, lit: bool) -> Dict:
    return {
        "seed": settings.seed,
        "width": session.grid.width,
        "height": session.grid.height,
        "start": list(session.observer_pos),
        "floor_tiles": session.grid.floor_count(),
        "signature": session.grid.signature(),
        "rows": render_ascii(session, lit),
    }


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(logging.DEBUG if args.debug else logging.INFO)

    settings = build_settings(args)

    if args.command == "play":
        from .app.arcade_app import run

        run(settings)
        return 0

    session = DungeonSession(settings)
    if args.lit:
        session.update()
    if args.format == "json":
        # JSON so runs with the same seed can be diffed
        print(json.dumps(summarize(session, settings, args.lit), indent=2, sort_keys=True))
    else:
        print("\n".join(render_ascii(session, args.lit)))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
