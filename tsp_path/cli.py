import argparse
import json
import random
import sys
import time
from pathlib import Path

from tsp_path.data import SOURCES, load_towns, parse_town_count
from tsp_path.evaluation import BACKENDS
from tsp_path.evolutionary import PRESETS, EvolutionarySearch, EvolutionConfig
from tsp_path.population import PopulationError
from tsp_path.render import DEFAULT_OUTPUT, write_tour_html
from tsp_path.tours.operators import CUT_POLICIES


FIRST_REPORT = 10
MAX_REPORTS = 4


def log(msg: str) -> None:
    ts = time.strftime("%H:%M:%S")
    print(f"[{ts}] {msg}", flush=True)


class ProgressReporter:
    """Logs the best fitness at generation 10, then on later improvements, four lines at most."""

    def __init__(self):
        self.reports = 0

    def __call__(self, search: EvolutionarySearch, gen: int) -> None:
        if not search.running:
            return
        refill = search.last_refill
        if refill is not None and not refill.ok:
            log(f"gen {gen}: refill {refill.error}: {refill.message}")
        improved = search.found_at == gen
        if gen == FIRST_REPORT or (gen > FIRST_REPORT and improved and self.reports < MAX_REPORTS):
            log(f"gen {gen}: best={search.best_score:.4f}")
            self.reports += 1


def _read_town_count(args) -> int:
    if args.towns is not None:
        return parse_town_count(str(args.towns))
    return parse_town_count(sys.stdin.readline())


def build_config(args) -> EvolutionConfig:
    return EvolutionConfig.from_preset(
        args.preset,
        population_size=args.population_size,
        patience=args.patience,
        max_generations=args.max_generations,
        crossover_cuts=args.cuts,
        backend=args.backend,
        random_seed=args.seed,
    )


def solve(args) -> None:
    cfg = build_config(args)
    rng = random.Random(cfg.random_seed)
    if args.source == "tsplib" and args.towns is None:
        n = None
    else:
        n = _read_town_count(args)
    towns = load_towns(args.source, n=n, rng=rng, path=args.tsplib)
    log(f"towns={len(towns)} source={args.source} preset={args.preset} population={cfg.population_size}")

    search = EvolutionarySearch(cfg, towns, rng=rng)
    result = search.run(on_generation=ProgressReporter())
    log(
        f"done after {result.generations} generations ({result.reason}); "
        f"best={result.fitness:.4f} found at gen {result.found_at}"
    )
    print(" ".join(str(t) for t in result.tour))

    out = write_tour_html(towns, result.tour, Path(args.output))
    log(f"wrote {out}")
    if args.result_json:
        path = Path(args.result_json)
        path.parent.mkdir(parents=True, exist_ok=True)
        state = {"config": cfg.to_state(), "towns": towns.coords.tolist(), "result": result.to_state()}
        path.write_text(json.dumps(state, indent=2))
        log(f"wrote {path}")


def presets(args) -> None:
    for name, cfg in PRESETS.items():
        print(f"{name}: {json.dumps(cfg.to_state())}")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Genetic search for short open paths through 2-D towns")
    subparsers = parser.add_subparsers(dest="command", required=True)

    solve_parser = subparsers.add_parser("solve", help="Evolve a path; reads the town count from stdin unless --towns is given")
    solve_parser.add_argument("--towns", type=int, default=None)
    solve_parser.add_argument("--source", choices=SOURCES, default="random")
    solve_parser.add_argument("--tsplib", type=Path, default=None, help="TSPLIB .tsp file for --source tsplib")
    solve_parser.add_argument("--preset", choices=sorted(PRESETS), default="reference")
    solve_parser.add_argument("--population-size", type=int, default=None)
    solve_parser.add_argument("--patience", type=int, default=None)
    solve_parser.add_argument("--max-generations", type=int, default=None)
    solve_parser.add_argument("--cuts", choices=CUT_POLICIES, default=None)
    solve_parser.add_argument("--backend", choices=BACKENDS, default=None)
    solve_parser.add_argument("--seed", type=int, default=None)
    solve_parser.add_argument("--output", default=str(DEFAULT_OUTPUT))
    solve_parser.add_argument("--result-json", default=None)
    solve_parser.set_defaults(func=solve)

    presets_parser = subparsers.add_parser("presets", help="List configuration presets")
    presets_parser.set_defaults(func=presets)

    args = parser.parse_args(argv)
    try:
        args.func(args)
    except ValueError as exc:
        parser.error(str(exc))
    except PopulationError as exc:
        log(f"fatal: {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
