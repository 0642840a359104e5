from pathlib import Path
from typing import List, Sequence

from .data import TownSet


CANVAS_SIZE = 1000
SCALE = 10.0
TOWN_RADIUS = 5

DEFAULT_OUTPUT = Path("tour.html")


def _fmt(value: float) -> str:
    return f"{value:g}"


def render_tour_html(towns: TownSet, tour: Sequence[int]) -> str:
    parts: List[str] = [
        "<!DOCTYPE html>",
        "<html>",
        "<body>",
        "",
        f"<svg height='{CANVAS_SIZE}' width='{CANVAS_SIZE}'>",
    ]
    for idx in tour:
        town = towns[idx]
        parts.append(
            f"<circle cx='{_fmt(town.x * SCALE)}' cy='{_fmt(town.y * SCALE)}' r='{TOWN_RADIUS}' "
            "stroke='black' stroke-width='3' fill='red'/>"
        )
    for a, b in zip(tour, tour[1:]):
        t1 = towns[a]
        t2 = towns[b]
        parts.append(
            f"<line x1='{_fmt(t1.x * SCALE)}' y1='{_fmt(t1.y * SCALE)}' "
            f"x2='{_fmt(t2.x * SCALE)}' y2='{_fmt(t2.y * SCALE)}' "
            "style='stroke:rgb(255,0,0);stroke-width:2' />"
        )
    parts.append("</svg></body></html>")
    return "\n".join(parts)


def write_tour_html(towns: TownSet, tour: Sequence[int], path: Path = DEFAULT_OUTPUT) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_tour_html(towns, tour))
    return path
